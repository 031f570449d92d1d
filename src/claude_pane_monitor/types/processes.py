"""Process snapshot and correlation result types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessRecord:
    """One row of the OS process list."""
    pid: int
    ppid: int
    tty: str | None
    command: str
    args: str | None = None

    def mentions(self, name: str) -> bool:
        """Case-insensitive match of name against command or args."""
        target = name.lower()
        if target in self.command.lower():
            return True
        return self.args is not None and target in self.args.lower()


@dataclass(frozen=True)
class DirectMatch:
    """TTY matched and the process itself is allow-listed."""
    process_name: str

    def display(self) -> str:
        return f"Direct: TTY match ({self.process_name})"


@dataclass(frozen=True)
class WrapperMatch:
    """TTY matched and an ancestor of the process is allow-listed."""
    wrapper_process: str

    def display(self) -> str:
        return f"Wrapper: parent process found ({self.wrapper_process})"


DetectionReason = DirectMatch | WrapperMatch
