"""Command-line interface loop for the to-do list.

Tasks are addressed by their row number in the list as currently shown
(after filter and search). The screen is redrawn whenever the store
reports a change; the store saves itself after every mutation, so leaving
the loop needs no extra persistence step.
"""
from typing import Callable, List, Optional

from models import Filter, Task
from store import TaskStore
from view import TodoView

# --- terminal control helpers ---
# We aggressively clear: ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home))
# Order (3J first) improves reliability in some terminals.
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    # Switch to alternate screen buffer
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    # Return to normal screen buffer
    print("\033[?1049l", end="", flush=True)


FILTER_ALIASES = {
    'a': Filter.ALL,
    'all': Filter.ALL,
    'ac': Filter.ACTIVE,
    'active': Filter.ACTIVE,
    'c': Filter.COMPLETED,
    'done': Filter.COMPLETED,
    'completed': Filter.COMPLETED,
}

CANCEL_TOKEN = ':q'


class CLI:
    def __init__(self, store: TaskStore, view: Optional[TodoView] = None,
                 alt_screen: bool = True, prompt: Callable[[str], str] = input):
        self.store: TaskStore = store
        self.view: TodoView = view or TodoView(store)
        self.alt_screen: bool = alt_screen
        self._input = prompt

    def run(self) -> None:
        """Main REPL loop; redraws on every store change.

        Uses the terminal's alternate screen (if enabled) so prior renders
        do not remain in scrollback history.
        """
        exit_message: Optional[str] = None
        unsubscribe = self.store.subscribe(self.redraw)
        if self.alt_screen:
            _enter_alt_screen()
        try:
            self.redraw()
            while True:
                line = self._input("\n: ").strip()
                if not line:
                    self.redraw()
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    self._help()
                    self._input("\nPress Enter to return to the list...")
                    self.redraw()
                    continue
                if lower in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                self._handle_command(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            unsubscribe()
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)

    def redraw(self) -> None:
        _clear_screen()
        self.view.display()

    # -------------------- command dispatch --------------------
    def _handle_command(self, line: str) -> None:
        tokens = line.split()
        cmd = tokens[0].lower()
        if cmd == 'add':
            self._cmd_add(line)
        elif cmd in ('t', 'toggle'):
            self._cmd_toggle(tokens)
        elif cmd in ('rm', 'remove'):
            self._cmd_rm(tokens)
        elif cmd == 'edit':
            self._cmd_edit(tokens)
        elif cmd == 'all':
            self.store.toggle_all()
        elif cmd == 'clear':
            self.store.clear_completed()
        elif cmd == 'reset':
            self._cmd_reset()
        elif cmd in ('f', 'filter'):
            self._cmd_filter(tokens)
        elif cmd in ('s', 'search'):
            self._cmd_search(line)
        else:
            # Refresh immediately, then show warning
            self.redraw()
            print("\nUnknown command. Type 'help' for instructions.")

    # ---- individual command helpers ----
    def _cmd_add(self, line: str) -> None:
        parts = line.split(None, 1)
        if len(parts) > 1:  # inline shorthand
            text = parts[1]
        else:
            text = self._input("Enter task text: ")
        if self.store.add(text) is None:
            print("Text required.")

    def _cmd_toggle(self, tokens: List[str]) -> None:
        task = self._task_from_tokens(tokens, "Usage: t <n>")
        if task is not None:
            self.store.toggle(task.id)

    def _cmd_rm(self, tokens: List[str]) -> None:
        task = self._task_from_tokens(tokens, "Usage: rm <n>")
        if task is not None:
            self.store.remove(task.id)

    def _cmd_edit(self, tokens: List[str]) -> None:
        task = self._task_from_tokens(tokens, "Usage: edit <n>")
        if task is None:
            return
        self.store.begin_edit(task.id)
        draft = self._input(f"New text for \"{task.text}\" (blank or {CANCEL_TOKEN} cancels): ")
        if draft.strip() == CANCEL_TOKEN:
            self.store.cancel_edit()
            return
        self.store.update_draft(draft)
        self.store.save_edit(task.id)

    def _cmd_reset(self) -> None:
        answer = self._input("Delete all tasks? [y/N]: ").strip().lower()
        if answer in ('y', 'yes'):
            self.store.reset()
        else:
            print("Reset cancelled.")

    def _cmd_filter(self, tokens: List[str]) -> None:
        if len(tokens) != 2:
            print("Usage: filter <all|active|completed>; aliases: a/ac/c")
            return
        selected = FILTER_ALIASES.get(tokens[1].lower())
        if selected is None:
            print("Invalid filter.")
            return
        self.store.set_filter(selected)

    def _cmd_search(self, line: str) -> None:
        parts = line.split(None, 1)
        self.store.set_search(parts[1] if len(parts) > 1 else '')

    def _task_from_tokens(self, tokens: List[str], usage: str) -> Optional[Task]:
        if len(tokens) != 2:
            print(usage)
            return None
        raw = tokens[1].rstrip('.')
        if not raw.isdigit():
            print("Invalid number.")
            return None
        number = int(raw)
        visible = self.store.visible_tasks()
        if number < 1 or number > len(visible):
            print(f"No task #{number}.")
            return None
        return visible[number - 1]

    # -------------------- help --------------------
    def _help(self) -> None:
        print("Commands:")
        print("  add <text...>       Add a task (prompts for text when omitted)")
        print("  t <n>               Toggle task n done/not done (also: toggle <n>)")
        print("  edit <n>            Edit the text of task n; blank or :q cancels")
        print("  rm <n>              Remove task n (also: remove <n>)")
        print("  all                 Complete every task, or reopen all if all are done")
        print("  clear               Remove completed tasks")
        print("  reset               Remove all tasks (asks for confirmation)")
        print("  filter <f>          Show all/active/completed (aliases: a/ac/c)")
        print("  search <text...>    Only show tasks containing text; 'search' alone clears")
        print("  help                Show this help (press Enter to return)")
        print("  exit                Exit (changes are saved as you go)")
