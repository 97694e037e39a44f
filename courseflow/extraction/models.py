from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int = 1

    @property
    def word_count(self) -> int:
        return len(self.text.split())
