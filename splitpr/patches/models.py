from dataclasses import dataclass

NULL_DEVICE = "/dev/null"


@dataclass(frozen=True)
class PatchRecord:
    old_path: str
    new_path: str
    contents: str

    @property
    def line_count(self) -> int:
        count = self.contents.count("\n")
        if self.contents and not self.contents.endswith("\n"):
            count += 1
        return count
