"""CLI for Studio Play Mode.

Terminal presentation layer: loads a class file, drives a Play Mode
session with a one-second ticker, and renders it with Rich. The session
core itself never touches the terminal.
"""

import queue
import sys
import threading
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import NoReturn, TextIO

import typer
from loguru import logger
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from playmode.classes.loader import load_class_plan
from playmode.classes.schemas import ClassPlan
from playmode.config.settings import settings
from playmode.core.logger import setup_logger
from playmode.session.controller import SessionController, validate_steps
from playmode.session.display import Urgency, estimate_class_seconds, format_clock
from playmode.session.errors import PlayModeError
from playmode.session.events import (
    CountdownTicked,
    Expired,
    Notice,
    PreviewDue,
    SessionAborted,
    SessionCompleted,
    SessionEvent,
    SessionPaused,
    SessionResumed,
    StepRestarted,
    StepSkipped,
    StepStarted,
    TimeAdded,
    TransitionExpired,
    TransitionStarted,
)
from playmode.session.models import SessionPhase, WorkoutStep
from playmode.session.ticker import IntervalTicker

# Initialize Rich console for output
console = Console()

app = typer.Typer(
    name="playmode",
    help="Studio Play Mode - guided class timer",
    add_completion=False,
)

EXIT_PROMPT = "Exit Play Mode? Progress will not be saved."
EXIT_COMMANDS = {"q", "quit", "exit"}

URGENCY_STYLES = {
    Urgency.NORMAL: "bold white",
    Urgency.CAUTION: "bold dark_orange",
    Urgency.CRITICAL: "bold red",
}


@dataclass
class SessionInputs:
    """Everything needed to start a session from a class file."""

    plan: ClassPlan
    steps: list[WorkoutStep]
    transition_seconds: int


@dataclass
class PlayModePresenter:
    """Renders session state and records the event timeline."""

    plan: ClassPlan
    controller: SessionController
    timeline: list[tuple[int, SessionEvent]] = field(default_factory=list)
    last_notice: str | None = None
    prompt: str | None = None
    controls_hint: str | None = None
    live: Live | None = None

    def handle_event(self, event: SessionEvent) -> None:
        if not isinstance(event, CountdownTicked):
            self.timeline.append((self.controller.elapsed_total_seconds, event))
        if isinstance(event, Notice):
            self.last_notice = event.message
        elif isinstance(event, StepStarted):
            self.last_notice = None
        self.refresh()

    def refresh(self) -> None:
        if self.live is not None:
            self.live.update(self.render())

    def render(self) -> Panel:
        snap = self.controller.snapshot()
        parts: list[Text] = [Text(f"{snap.current_index + 1} / {snap.step_count}", style="dim")]

        if snap.is_transitioning:
            parts.append(Text("TRANSITION", style="bold cyan"))
            if snap.next_step is not None:
                parts.append(Text(f"Get ready: {snap.next_step.name}"))
        elif snap.current_step is not None:
            parts.append(Text(snap.current_step.name, style="bold"))

        parts.append(Text(snap.clock, style=URGENCY_STYLES[snap.urgency]))

        if snap.phase == SessionPhase.PAUSED:
            parts.append(Text("PAUSED", style="bold yellow"))

        step = snap.current_step
        if not snap.is_transitioning and step is not None:
            if step.coaching_cues:
                parts.append(Text(step.coaching_cues, style="italic"))
            if step.media_reference:
                parts.append(Text(f"Media: {step.media_reference}", style="dim"))

        if snap.show_up_next and snap.next_step is not None:
            parts.append(Text(f"UP NEXT  {snap.next_step.name}", style="bold green"))

        if self.last_notice:
            parts.append(Text(self.last_notice, style="yellow"))

        if self.prompt:
            parts.append(Text(self.prompt, style="bold yellow"))
        elif self.controls_hint:
            parts.append(Text(self.controls_hint, style="dim"))

        return Panel(
            Group(*parts),
            title=self.plan.name,
            subtitle=f"Elapsed {format_clock(snap.elapsed_total_seconds)}",
            border_style="cyan" if snap.is_transitioning else "green",
        )

    def timeline_table(self) -> Table:
        table = Table(title=f"{self.plan.name} - timeline")
        table.add_column("Elapsed", justify="right", style="dim")
        table.add_column("Event", style="bold")
        table.add_column("Detail")
        for elapsed, event in self.timeline:
            table.add_row(format_clock(elapsed), type(event).__name__, describe_event(event))
        return table


def describe_event(event: SessionEvent) -> str:
    """Human-readable one-liner for a session event."""
    if isinstance(event, StepStarted):
        return f"{event.step.name} ({format_clock(event.duration_seconds)})"
    if isinstance(event, PreviewDue):
        return f"Up next: {event.next_step.name}"
    if isinstance(event, Expired):
        return f"Workout {event.index + 1} finished"
    if isinstance(event, TransitionStarted):
        return f"{event.duration_seconds}s before workout {event.to_index + 1}"
    if isinstance(event, TransitionExpired):
        return f"Starting workout {event.to_index + 1}"
    if isinstance(event, StepSkipped):
        return f"Workout {event.from_index + 1} -> {event.to_index + 1}"
    if isinstance(event, StepRestarted):
        return f"Workout {event.index + 1} from {format_clock(event.duration_seconds)}"
    if isinstance(event, TimeAdded):
        return f"Added {event.seconds} seconds ({format_clock(event.seconds_remaining)} left)"
    if isinstance(event, (SessionPaused, SessionResumed)):
        return str(event.phase)
    if isinstance(event, SessionCompleted):
        return f"Total time {format_clock(event.total_elapsed)}"
    if isinstance(event, SessionAborted):
        return "Progress was not saved"
    if isinstance(event, Notice):
        return event.message
    return ""


class CommandReader:
    """Reads typed commands on a daemon thread.

    The thread only queues lines. The play loop drains the queue between
    ticks so every session mutation stays on the main thread.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._commands: queue.Queue[str] = queue.Queue()
        self.thread = threading.Thread(target=self._read, name="playmode-commands", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def drain(self) -> list[str]:
        commands: list[str] = []
        while True:
            try:
                commands.append(self._commands.get_nowait())
            except queue.Empty:
                return commands

    def _read(self) -> None:
        stream = self._stream if self._stream is not None else sys.stdin
        for line in iter(stream.readline, ""):
            command = line.strip().lower()
            if command:
                self._commands.put(command)
        logger.debug("Command input closed")


@dataclass
class PlayControls:
    """Maps typed commands onto session controls.

    Commands: p (pause/resume), b (previous), n (next), r (restart),
    +N (add N seconds, N from the time adjust options), q (exit).
    Exiting asks for confirmation through the same command stream.
    """

    controller: SessionController
    presenter: PlayModePresenter
    adjust_options: list[int]
    confirming_exit: bool = False
    resume_after_prompt: bool = False

    @property
    def hint(self) -> str:
        adds = " ".join(f"+{seconds}" for seconds in self.adjust_options)
        return f"p pause  b back  n next  r restart  {adds} add time  q exit  (then Enter)"

    def handle(self, command: str) -> None:
        command = command.strip().lower()
        if self.confirming_exit:
            self._answer_exit(command)
        elif command in EXIT_COMMANDS:
            self.ask_exit()
        elif command == "p":
            self.controller.toggle_pause()
        elif command == "b":
            self.controller.skip_backward()
        elif command == "n":
            self.controller.skip_forward()
        elif command == "r":
            self.controller.restart_current_step()
        elif command.startswith("+") and command[1:] in {str(seconds) for seconds in self.adjust_options}:
            self.controller.add_seconds(int(command[1:]))
        else:
            logger.debug("Unknown Play Mode command", command=command)
            self.presenter.last_notice = f"Unknown command: {command}"
        self.presenter.refresh()

    def ask_exit(self) -> None:
        """Pause and ask whether to leave. Asking again while the prompt is up leaves."""
        if self.controller.phase.is_terminal:
            return
        if self.confirming_exit:
            self._answer_exit("y")
            return
        self.resume_after_prompt = self.controller.phase != SessionPhase.PAUSED
        self.controller.pause()
        self.confirming_exit = True
        self.presenter.prompt = f"{EXIT_PROMPT} [y/N]"
        self.presenter.refresh()

    def _answer_exit(self, answer: str) -> None:
        self.confirming_exit = False
        self.presenter.prompt = None
        if answer in {"y", "yes"}:
            self.controller.abort()
        elif self.resume_after_prompt:
            self.controller.resume()
        self.presenter.refresh()


def _apply_commands(reader: CommandReader, controls: PlayControls) -> None:
    for command in reader.drain():
        controls.handle(command)


def run_live_session(
    controller: SessionController,
    live: Live,
    ticker: IntervalTicker,
    controls: PlayControls | None = None,
    reader: CommandReader | None = None,
) -> None:
    """Tick a started session in real time until it completes or is aborted.

    Typed commands are applied between ticks. Ctrl+C asks to exit: through
    the command stream when a reader is attached, otherwise with a prompt.
    """
    idle = None
    if controls is not None and reader is not None:
        idle = partial(_apply_commands, reader, controls)

    while not controller.phase.is_terminal:
        try:
            ticker.run(controller.tick, until=lambda: controller.phase.is_terminal, idle=idle)
        except KeyboardInterrupt:
            if idle is not None:
                controls.ask_exit()
            else:
                _confirm_exit(controller, live)


def _setup_logging(debug: bool = False) -> None:
    """Set up logging for the CLI.

    The console only shows warnings unless debug is enabled so log lines do
    not tear through the live Play Mode panel.
    """
    setup_logger(
        level="DEBUG" if debug else settings.log_level,
        log_file=settings.log_file,
        console_level="DEBUG" if debug else "WARNING",
    )


def _exit_with_error(error: PlayModeError) -> NoReturn:
    console.print(f"[red]Error:[/red] {error.message}", style="bold red")
    for detail in error.details:
        console.print(f"  - {detail}")
    raise typer.Exit(1) from error


def _load_session_inputs(class_file: Path, transition: int | None) -> SessionInputs:
    """Load a class file and resolve the transition length.

    Steps are validated here so every command rejects the same class files.
    Precedence: --transition flag, then the class file, then settings.
    """
    plan = load_class_plan(class_file)
    steps = list(validate_steps(plan.to_steps()))
    transition_seconds = transition or plan.transition_seconds or settings.transition_seconds
    return SessionInputs(plan=plan, steps=steps, transition_seconds=transition_seconds)


def _start_session(inputs: SessionInputs) -> tuple[SessionController, PlayModePresenter]:
    controller = SessionController(inputs.transition_seconds)
    presenter = PlayModePresenter(plan=inputs.plan, controller=controller)
    controller.subscribe(presenter.handle_event)
    controller.start(inputs.steps)
    return controller, presenter


def _parse_skip(value: str) -> tuple[int, int]:
    step_text, _, seconds_text = value.partition(":")
    try:
        step_number = int(step_text)
        seconds = int(seconds_text)
    except ValueError:
        raise typer.BadParameter(f"Invalid --skip-at value {value!r}, expected STEP:SECONDS") from None
    if step_number < 1 or seconds < 0:
        raise typer.BadParameter(f"Invalid --skip-at value {value!r}, STEP starts at 1 and SECONDS at 0")
    return step_number, seconds


def run_simulation(
    controller: SessionController,
    skips: set[tuple[int, int]] | None = None,
) -> list[tuple[int, int]]:
    """Fast-forward a started session to a terminal phase without sleeping.

    Args:
        controller: Started session controller
        skips: (step number, seconds into step) positions at which to skip forward

    Returns:
        Skip positions the session never reached, sorted
    """
    pending = set(skips or ())
    while not controller.phase.is_terminal:
        if controller.phase == SessionPhase.RUNNING and pending:
            position = (
                controller.current_index + 1,
                controller.countdown.total_duration - controller.countdown.seconds_remaining,
            )
            if position in pending:
                pending.discard(position)
                controller.skip_forward()
                continue
        controller.tick()

    return sorted(pending)


def _confirm_exit(controller: SessionController, live: Live) -> None:
    """Pause, ask whether to leave Play Mode, then abort or resume."""
    controller.pause()
    live.stop()
    try:
        leave = typer.confirm(EXIT_PROMPT, default=False)
    except typer.Abort:
        leave = True
    if leave:
        controller.abort()
        return
    live.start()
    controller.resume()


def _print_outcome(plan: ClassPlan, controller: SessionController) -> None:
    if controller.phase == SessionPhase.COMPLETED:
        console.print(
            Panel(
                Text(
                    f'You finished "{plan.name}"!\n\nTotal time: {format_clock(controller.elapsed_total_seconds)}',
                ),
                title="Class Complete!",
                border_style="green",
            )
        )
    elif controller.phase == SessionPhase.ABORTED:
        console.print(
            Panel(
                Text("Play Mode exited. Progress was not saved.", style="yellow"),
                border_style="yellow",
            )
        )


@app.command()
def show(
    class_file: Path = typer.Argument(..., help="Class file (.yaml, .yml or .json)"),
    transition: int | None = typer.Option(None, "--transition", "-t", min=1, help="Transition length in seconds"),
) -> None:
    """List the workouts of a class and its estimated length."""
    _setup_logging()
    try:
        inputs = _load_session_inputs(class_file, transition)
    except PlayModeError as e:
        _exit_with_error(e)

    table = Table(title=inputs.plan.name)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Workout", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Cues")
    for index, step in enumerate(inputs.steps, start=1):
        table.add_row(str(index), step.name, format_clock(step.duration_seconds), step.coaching_cues or "")
    console.print(table)

    total = estimate_class_seconds(inputs.steps, inputs.transition_seconds)
    console.print(
        f"Estimated class length: [bold]{format_clock(total)}[/bold] "
        f"({len(inputs.steps)} workouts, {inputs.transition_seconds}s transitions)"
    )


@app.command()
def play(
    class_file: Path = typer.Argument(..., help="Class file (.yaml, .yml or .json)"),
    transition: int | None = typer.Option(None, "--transition", "-t", min=1, help="Transition length in seconds"),
    speed: float = typer.Option(1.0, "--speed", min=0.1, help="Clock speed multiplier"),
    commands: bool = typer.Option(
        True,
        "--commands/--no-commands",
        help="Read typed controls (pause, skip, restart, add time) from the terminal",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Run a class in Play Mode in real time.

    Type p, b, n, r, +15/+30/+60 or q and press Enter to control the
    session. Ctrl+C also asks to exit.
    """
    _setup_logging(debug)
    try:
        inputs = _load_session_inputs(class_file, transition)
        controller, presenter = _start_session(inputs)
    except PlayModeError as e:
        _exit_with_error(e)

    ticker = IntervalTicker(settings.tick_interval_seconds / speed)
    controls = PlayControls(controller, presenter, settings.time_adjust_options)
    reader = CommandReader() if commands and sys.stdin.isatty() else None
    if reader is not None:
        presenter.controls_hint = controls.hint

    with Live(presenter.render(), console=console, refresh_per_second=4) as live:
        presenter.live = live
        if reader is not None:
            reader.start()
        run_live_session(controller, live, ticker, controls, reader)
        presenter.live = None

    _print_outcome(inputs.plan, controller)


@app.command()
def simulate(
    class_file: Path = typer.Argument(..., help="Class file (.yaml, .yml or .json)"),
    transition: int | None = typer.Option(None, "--transition", "-t", min=1, help="Transition length in seconds"),
    skip_at: list[str] | None = typer.Option(
        None,
        "--skip-at",
        help="Skip forward at STEP:SECONDS (1-based step, seconds into the step). Repeatable.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Fast-forward a class and print its event timeline."""
    _setup_logging(debug)
    skips = {_parse_skip(value) for value in skip_at or []}
    try:
        inputs = _load_session_inputs(class_file, transition)
        controller, presenter = _start_session(inputs)
    except PlayModeError as e:
        _exit_with_error(e)

    unreached = run_simulation(controller, skips)

    console.print(presenter.timeline_table())
    for step_number, seconds in unreached:
        logger.warning("Skip position never reached", step=step_number, seconds=seconds)
        console.print(f"[yellow]Warning:[/yellow] --skip-at {step_number}:{seconds} was never reached")
    _print_outcome(inputs.plan, controller)


if __name__ == "__main__":
    app()
