from __future__ import annotations


def asciify(text: str, padding: int = 1, *, char: str = "*", horizontal_stretch: int = 5) -> str:
    """
    Wrap `text` in a box of `char`, e.g.:

        *****************
        *               *
        *     hello     *
        *               *
        *****************
    """
    side = " " * (padding * horizontal_stretch)
    inner_width = len(text) + 2 * len(side)
    border = char * (inner_width + 2)
    gap = char + " " * inner_width + char

    lines = [border]
    lines += [gap] * padding
    lines.append(f"{char}{side}{text}{side}{char}")
    lines += [gap] * padding
    lines.append(border)
    return "\n".join(lines)
