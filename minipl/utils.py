import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def pointer_lines(text: str, idx: int, context: int = 10) -> list[str]:
    """Two lines: a window of ``text`` around ``idx`` and a caret under ``idx``"""
    start_idx = max(0, idx - context)
    ellipsis_pre = start_idx > 0
    end_idx = min(len(text), idx + context)
    ellipsis_post = end_idx < len(text)
    # newlines would break the caret alignment
    window = text[start_idx:end_idx].replace("\n", " ").replace("\t", " ")
    return [
        ("..." if ellipsis_pre else "") + window + ("..." if ellipsis_post else ""),
        " " * (idx - start_idx + (3 if ellipsis_pre else 0)) + "^",
    ]
