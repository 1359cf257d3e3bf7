"""
Prompting collaborators.

The trackers never read stdin themselves. Whenever an operation needs a
decision from the operator (proceed despite blockers, mark complete at 100%,
unblock after the last issue) it asks the Prompter it was given. Each call
returns before the operation continues.
"""

from typing import Sequence


class Prompter:
    """Base prompter: answers every question with its default."""

    def confirm(self, message: str, default: bool = False) -> bool:
        return default

    def ask(self, message: str, default: str = "") -> str:
        return default

    def choose(self, message: str, options: Sequence[str], default: int = 1) -> str:
        """Pick one of options. default is 1-indexed."""
        return options[default - 1]

    def notify(self, message: str) -> None:
        pass


class AutoPrompter(Prompter):
    """Non-interactive prompter for automation (--yes / --no-input)."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, message: str, default: bool = False) -> bool:
        return self.assume_yes

    def notify(self, message: str) -> None:
        # Warnings still reach the operator when nothing is asked
        print(message)


class ScriptedPrompter(Prompter):
    """Replays a fixed list of answers in order, then falls back to defaults."""

    def __init__(self, answers: Sequence = ()):
        self.answers = list(answers)
        self.asked: list[str] = []

    def _next(self):
        if self.answers:
            return self.answers.pop(0)
        return None

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        answer = self._next()
        if answer is None:
            return default
        if isinstance(answer, str):
            return answer.strip().lower() in ("y", "yes", "true", "1")
        return bool(answer)

    def ask(self, message: str, default: str = "") -> str:
        self.asked.append(message)
        answer = self._next()
        return default if answer is None else str(answer)

    def choose(self, message: str, options: Sequence[str], default: int = 1) -> str:
        self.asked.append(message)
        answer = self._next()
        if answer in options:
            return answer
        return options[default - 1]


class ConsolePrompter(Prompter):
    """Interactive prompter on stdin/stdout."""

    def confirm(self, message: str, default: bool = False) -> bool:
        default_str = "Y/n" if default else "y/N"
        try:
            value = input(f"{message} [{default_str}]: ").strip().lower()
            if not value:
                return default
            return value in ("y", "yes", "true", "1")
        except EOFError:
            return default

    def ask(self, message: str, default: str = "") -> str:
        display = f"{message} [{default}]: " if default else f"{message}: "
        try:
            value = input(display).strip()
            return value if value else default
        except EOFError:
            return default

    def choose(self, message: str, options: Sequence[str], default: int = 1) -> str:
        print(f"\n{message}")
        for i, option in enumerate(options, 1):
            marker = "*" if i == default else " "
            print(f"  {marker}{i}. {option}")

        while True:
            try:
                selection = input(f"Select [1-{len(options)}, default={default}]: ").strip()
                if not selection:
                    return options[default - 1]
                idx = int(selection)
                if 1 <= idx <= len(options):
                    return options[idx - 1]
                print(f"Please enter a number between 1 and {len(options)}")
            except ValueError:
                print("Please enter a valid number")
            except EOFError:
                return options[default - 1]

    def notify(self, message: str) -> None:
        print(message)
