"""Intcode Interactive Debugger

Provides a command-line interface for debugging Intcode programs.
"""

import cmd
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, Set

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..errors import IntcodeError
from ..program import DEFAULT_MEMORY_SIZE, Program


class IntcodeDebugger(cmd.Cmd):
    """Interactive debugger for Intcode programs."""

    intro = """Intcode Interactive Debugger v0.1.0
Type 'help' or '?' for commands.
"""
    prompt = "(intcode-debug) "

    def __init__(self, console: Optional[Console] = None, capacity: Optional[int] = DEFAULT_MEMORY_SIZE):
        super().__init__()
        self.program: Optional[Program] = None
        self.original: Optional[Program] = None
        self.filename: Optional[str] = None
        self.capacity = capacity
        self.console = console or Console()

        self.inputs: Deque[int] = deque()
        self.outputs: List[int] = []
        self.breakpoints: Set[int] = set()

        self.last_dump_address = 0
        self.last_dump_count = 16

    def preloop(self):
        """Setup before command loop."""
        self.console.print("[bold blue]Intcode Interactive Debugger[/bold blue]")
        self.console.print("Load a program with 'load <filename>' to start debugging.\n")

    # File operations

    def do_load(self, arg: str) -> None:
        """Load a source file: load <filename>"""
        if not arg:
            self.console.print("[red]Error: Please specify a filename[/red]")
            return

        try:
            self.original = Program.from_file(arg, capacity=self.capacity)
        except (OSError, IntcodeError) as e:
            self.console.print(f"[red]Error loading program: {e}[/red]")
            return

        self.filename = arg
        self._restart()
        self.console.print(f"[green]Program loaded: {arg}[/green]")
        self._show_status()

    def do_reload(self, arg: str) -> None:
        """Reload the current program from disk"""
        if not self.filename:
            self.console.print("[red]No program loaded[/red]")
            return

        self.do_load(self.filename)

    # Execution control

    def do_input(self, arg: str) -> None:
        """Queue input values: input <v>[,<v>...]"""
        if not self._require_program():
            return

        try:
            values = [int(part) for part in arg.replace(',', ' ').split()]
        except ValueError:
            self.console.print("[red]Invalid input value[/red]")
            return

        self.inputs.extend(values)
        self.console.print(f"[green]Pending inputs: {list(self.inputs)}[/green]")

    def do_step(self, arg: str) -> None:
        """Execute instruction(s): step [count]"""
        if not self._require_program():
            return

        count = 1
        if arg:
            try:
                count = int(arg)
            except ValueError:
                self.console.print("[red]Invalid step count[/red]")
                return

        for _ in range(count):
            if not self._step():
                break

        self._show_status()

    def do_next(self, arg: str) -> None:
        """Run until the next output, breakpoint or halt: next"""
        if not self._require_program():
            return

        before = len(self.outputs)
        self._run_until(lambda: len(self.outputs) > before)
        self._show_status()

    def do_run(self, arg: str) -> None:
        """Run until halt or breakpoint: run"""
        if not self._require_program():
            return

        self._run_until(lambda: False)
        self._show_status()

    def do_continue(self, arg: str) -> None:
        """Continue execution: continue"""
        self.do_run(arg)

    def do_reset(self, arg: str) -> None:
        """Restart the program from its original memory: reset"""
        if not self._require_program():
            return

        self._restart()
        self.console.print("[green]Program reset[/green]")
        self._show_status()

    # Breakpoints

    def do_break(self, arg: str) -> None:
        """Set breakpoint: break <address>"""
        if not self._require_program():
            return

        if not arg:
            self._list_breakpoints()
            return

        try:
            address = self._parse_int(arg)
        except ValueError:
            self.console.print("[red]Invalid address[/red]")
            return

        self.breakpoints.add(address)
        self.console.print(f"[green]Breakpoint set at {address}[/green]")

    def do_delete(self, arg: str) -> None:
        """Delete breakpoint: delete <address>"""
        if not self._require_program():
            return

        if not arg:
            self.console.print("[red]Please specify breakpoint address[/red]")
            return

        try:
            address = self._parse_int(arg)
        except ValueError:
            self.console.print("[red]Invalid address[/red]")
            return

        self.breakpoints.discard(address)
        self.console.print(f"[yellow]Breakpoint cleared at {address}[/yellow]")

    def do_clear(self, arg: str) -> None:
        """Clear all breakpoints: clear"""
        self.breakpoints.clear()
        self.console.print("[yellow]All breakpoints cleared[/yellow]")

    # Information display

    def do_status(self, arg: str) -> None:
        """Show program status: status"""
        if not self._require_program():
            return

        self._show_status()

    def do_memory(self, arg: str) -> None:
        """Show memory: memory [address] [count]"""
        if not self._require_program():
            return

        address = self.last_dump_address
        count = self.last_dump_count

        parts = arg.split()
        try:
            if len(parts) >= 1:
                address = self._parse_int(parts[0])
            if len(parts) >= 2:
                count = int(parts[1])
        except ValueError:
            self.console.print("[red]Invalid address or count[/red]")
            return

        self.last_dump_address = address
        self.last_dump_count = count

        self._show_memory(address, count)

    def do_program(self, arg: str) -> None:
        """Show disassembly: program [address] [count]"""
        if not self._require_program():
            return

        start = self.program.ip
        count = 10

        parts = arg.split()
        try:
            if len(parts) >= 1:
                start = self._parse_int(parts[0])
            if len(parts) >= 2:
                count = int(parts[1])
        except ValueError:
            self.console.print("[red]Invalid address or count[/red]")
            return

        self._show_program(start, count)

    def do_outputs(self, arg: str) -> None:
        """Show every output emitted so far: outputs"""
        if not self._require_program():
            return

        self.console.print(f"Outputs: {self.outputs}")

    # Memory modification

    def do_set(self, arg: str) -> None:
        """Set memory: set <address> <value>"""
        if not self._require_program():
            return

        parts = arg.split()
        if len(parts) != 2:
            self.console.print("[red]Usage: set <address> <value>[/red]")
            return

        try:
            address = self._parse_int(parts[0])
            value = self._parse_int(parts[1])
            self.program.write(address, value)
        except (ValueError, IntcodeError) as e:
            self.console.print(f"[red]Error: {e}[/red]")
            return

        self.console.print(f"[green]Memory[{address}] = {value}[/green]")

    # Utility commands

    def do_quit(self, arg: str) -> bool:
        """Quit the debugger: quit"""
        self.console.print("[blue]Goodbye![/blue]")
        return True

    def do_exit(self, arg: str) -> bool:
        """Exit the debugger: exit"""
        return self.do_quit(arg)

    def do_help(self, arg: str) -> None:
        """Show help: help [command]"""
        if arg:
            super().do_help(arg)
        else:
            self.console.print(Panel(
                "[bold]Intcode Debugger Commands[/bold]\n\n"
                "[green]File Operations:[/green]\n"
                "  load <file>     - Load source file\n"
                "  reload          - Reload current program\n\n"
                "[green]Execution Control:[/green]\n"
                "  input <v,...>   - Queue input values\n"
                "  step [count]    - Execute instruction(s)\n"
                "  next            - Run to next output\n"
                "  run             - Run to halt or breakpoint\n"
                "  reset           - Restart from original memory\n\n"
                "[green]Breakpoints:[/green]\n"
                "  break [addr]    - Set/list breakpoints\n"
                "  delete <addr>   - Delete breakpoint\n"
                "  clear           - Clear all breakpoints\n\n"
                "[green]Information:[/green]\n"
                "  status          - Show program status\n"
                "  memory [addr]   - Show memory\n"
                "  program [addr]  - Show disassembly\n"
                "  outputs         - Show outputs so far\n\n"
                "[green]Modification:[/green]\n"
                "  set <a> <v>     - Set memory\n\n"
                "[green]Other:[/green]\n"
                "  help [cmd]      - Show help\n"
                "  quit/exit       - Exit debugger",
                title="Help",
                border_style="blue"
            ))

    # Helper methods

    def _require_program(self) -> bool:
        if not self.program:
            self.console.print("[red]No program loaded[/red]")
            return False
        return True

    def _restart(self) -> None:
        if self.program is None:
            self.program = Program.empty(self.original.mem_size)
        self.program.mimic(self.original)
        self.inputs.clear()
        self.outputs.clear()

    def _step(self) -> bool:
        """Execute one instruction; False once execution cannot continue."""
        if self.program.is_halted:
            self.console.print("[yellow]Program halted[/yellow]")
            return False

        try:
            output = self.program.step(self.inputs)
        except IntcodeError as e:
            self.console.print(f"[red]Execution error: {e}[/red]")
            return False

        if output is not None:
            self.outputs.append(output)
            self.console.print(f"[cyan]Output: {output}[/cyan]")
        return not self.program.is_halted

    def _run_until(self, done) -> None:
        # The first instruction runs even with a breakpoint at the current IP
        if not self._step():
            return
        while not done():
            if self.program.ip in self.breakpoints:
                self.console.print(f"[yellow]Breakpoint hit at {self.program.ip}[/yellow]")
                return
            if not self._step():
                return

    def _show_status(self) -> None:
        """Display program status."""
        if not self.program:
            return

        state = self.program.get_state()
        cpu_state = state['cpu']

        status_text = f"""[bold]State:[/bold] {cpu_state['state']}
[bold]IP:[/bold] {cpu_state['ip']}
[bold]Relative Base:[/bold] {cpu_state['relative_base']}
[bold]Instructions:[/bold] {cpu_state['instruction_count']}
[bold]Memory:[/bold] {state['memory']['size']} words
[bold]Pending Inputs:[/bold] {list(self.inputs)}
[bold]Last Output:[/bold] {self.outputs[-1] if self.outputs else '-'}"""

        if cpu_state.get('halt_reason'):
            status_text += f"\n[bold]Halt Reason:[/bold] {cpu_state['halt_reason']}"

        self.console.print(Panel(status_text, title="Program Status", border_style="green"))

    def _show_memory(self, address: int, count: int = 16) -> None:
        """Display memory contents."""
        memory_data = self.program.get_memory_dump(address, count)
        if not memory_data:
            self.console.print(f"[red]No memory at {address} (size {self.program.mem_size})[/red]")
            return

        table = Table(title=f"Memory ({address})")
        table.add_column("Address", style="cyan")
        table.add_column("Dec", style="yellow")
        table.add_column("Marker", style="red")

        for addr, value in memory_data.items():
            marker = ""
            if addr == self.program.ip:
                marker = "IP"
            elif addr == self.program.relative_base:
                marker = "RB"
            table.add_row(f"{addr:04d}", f"{value}", marker)

        self.console.print(table)

    def _show_program(self, start: int = 0, count: int = 10) -> None:
        """Display disassembled instructions."""
        program_data = self.program.get_program_dump(start, count)

        table = Table(title="Program")
        table.add_column("Address", style="cyan")
        table.add_column("Instruction", style="green")
        table.add_column("IP", style="red")

        for line in program_data:
            addr_text, text = line.split(': ', 1)
            addr = int(addr_text)
            ip_marker = ">>>" if addr == self.program.ip else ""
            breakpoint_marker = "*" if addr in self.breakpoints else ""
            table.add_row(addr_text, Text(text), f"{ip_marker} {breakpoint_marker}".strip())

        self.console.print(table)

    def _list_breakpoints(self) -> None:
        """List all breakpoints."""
        if not self.breakpoints:
            self.console.print("[yellow]No breakpoints set[/yellow]")
            return

        table = Table(title="Breakpoints")
        table.add_column("Address", style="cyan")

        for addr in sorted(self.breakpoints):
            table.add_row(f"{addr}")

        self.console.print(table)

    def _parse_int(self, text: str) -> int:
        """Parse an integer (decimal, or hex with 0x prefix)."""
        if text.lower().startswith(('0x', '-0x')):
            return int(text, 16)
        return int(text)


def start_interactive_debugger(program_file: Optional[str] = None,
                               capacity: Optional[int] = DEFAULT_MEMORY_SIZE) -> None:
    """Start the interactive debugger.

    Args:
        program_file: Optional program file to load automatically
        capacity: Memory size programs are padded to
    """
    debugger = IntcodeDebugger(capacity=capacity)

    if program_file:
        debugger.onecmd(f"load {Path(program_file)}")

    try:
        debugger.cmdloop()
    except KeyboardInterrupt:
        print("\nGoodbye!")
