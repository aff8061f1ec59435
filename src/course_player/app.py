"""Interactive CLI application."""
import logging
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from course_player.backend import Backend
from course_player.certificates import CertificateEligibility
from course_player.config import DEFAULT_DB_PATH, MASTER_CERT, get_setting, set_setting
from course_player.db import init_db
from course_player.errors import BackendError
from course_player.importer import import_catalog
from course_player.log import configure_logging
from course_player.models import ROLE_ADMIN, ROLE_STUDENT, ROLE_SUPERVISOR
from course_player.player import Active, Completed, CoursePlayer, Locked, QuizPending
from course_player.seed import is_seeded, seed_all

console = Console()
logger = logging.getLogger(__name__)

PLAYER_HELP = [
    ("play / pause", "Start or stop playback"),
    ("watch N", "Play N seconds"),
    ("seek T", "Move the play head to T seconds"),
    ("skip / back", "Jump 10 seconds forward / back"),
    ("complete", "Mark the episode complete"),
    ("quiz", "Take the pending quiz"),
    ("episode N", "Open episode N"),
    ("blur / printscreen", "Send a tab-hidden or PrintScreen event"),
    ("fav", "Toggle favorite"),
    ("exit", "Back to courses"),
]


def current_user(db_path: str) -> tuple[str, str]:
    return get_setting(db_path, "user_id", "student-1"), get_setting(db_path, "role", ROLE_STUDENT)


def show_welcome():
    console.print(Panel(
        "[bold]Course Player[/bold]\n[dim]Sequential lessons, knowledge checks and certificates[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("courses", "List courses and progress"),
        ("play", "Open a course in the player"),
        ("certificates", "View and claim certificates"),
        ("favorites", "List favorite courses"),
        ("import", "Import a curriculum file"),
        ("whoami", "Switch user or role"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def fmt_time(seconds: float) -> str:
    if not seconds:
        return "00:00"
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


def run_quiz_session(quiz) -> list[int]:
    """Ask every question of ``quiz`` and return the chosen option indices."""
    answers = []
    console.print(f"\n[bold]{quiz.title}[/bold] — {len(quiz.questions)} questions, pass at {quiz.passing_score}%\n")
    for i, q in enumerate(quiz.questions, 1):
        console.print(f"[bold]Q{i}.[/bold] {q.text}\n")
        for idx, option in enumerate(q.options, 1):
            console.print(f"  [cyan]{idx})[/cyan] {option}")
        choice = IntPrompt.ask("\nYour answer", choices=[str(n) for n in range(1, len(q.options) + 1)])
        answers.append(choice - 1)
        console.print()
    return answers


def show_player(player: CoursePlayer):
    state = player.state
    episode = player.current_episode
    table = Table(title=f"{player.course.title}  [dim]{player.course.instructor}[/dim]")
    table.add_column("#", justify="right")
    table.add_column("Episode")
    table.add_column("Duration")
    table.add_column("Status")
    for idx, ep in enumerate(player.episodes):
        if idx == player.current_episode_index:
            status = "[violet]▶ Playing[/violet]"
        elif player.is_episode_locked(idx):
            status = "[dim]Locked[/dim]"
        elif ep.completed:
            status = "[green]Done[/green]"
        else:
            status = ""
        table.add_row(str(idx + 1), ep.title, ep.duration, status)
    console.print(table)

    if isinstance(state, Locked):
        console.print("[yellow]You are not enrolled in this course.[/yellow]")
        return
    s = player.session
    bar_filled = player.progress_percent // 5
    bar = f"[violet]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/violet]"
    console.print(
        f"  {episode.title}: {bar} {player.progress_percent}%  "
        f"{fmt_time(s.current_time)} / {fmt_time(s.duration)}  "
        f"[dim](watched up to {fmt_time(s.max_time_reached)})[/dim]"
        + ("  [green]Playing[/green]" if player.is_playing else "  [dim]Paused[/dim]")
        + ("  [yellow]★[/yellow]" if player.is_favorite else "")
    )
    if isinstance(state, QuizPending):
        console.print(f"[bold yellow]Quiz required:[/bold yellow] {state.quiz.title}")
    elif isinstance(state, Completed):
        console.print("[green]Course completed. Review mode.[/green]")
    if player.media_error:
        console.print(f"[red]Video error: {player.media_error}[/red]")
    if player.monitor.alert:
        console.print(f"[red]{player.monitor.alert.message}[/red]")


def cmd_play(backend: Backend, role: str):
    courses = backend.get_courses()
    if not courses:
        console.print("[yellow]No courses available. Import a catalog first.[/yellow]")
        return
    for i, c in enumerate(courses, 1):
        console.print(f"  [cyan]{i}[/cyan]) {c.title} [dim]{c.progress}%[/dim]")
    pick = IntPrompt.ask("Select course", choices=[str(i) for i in range(1, len(courses) + 1)])
    course = courses[pick - 1]

    eligibility = CertificateEligibility(backend.get_certificates())
    player = CoursePlayer(
        course, backend, role=role,
        notifier=lambda message: console.print(f"[yellow]{message}[/yellow]"),
    )

    def offer_certificate(completed_course):
        if eligibility.course_completed(completed_course.id):
            console.print(f"[bold green]Certificate available for {completed_course.title}! "
                          "Claim it from 'certificates'.[/bold green]")

    player.on_completed(offer_certificate)
    if isinstance(player.state, Locked):
        if Prompt.ask("Enroll in this course?", choices=["y", "n"], default="y") == "y":
            player.enroll()
    if isinstance(player.state, Locked):
        return

    while True:
        if not player.session.duration:
            # Stand-in duration for the simulated video element
            player.time_update(player.session.current_time, 600)
        show_player(player)
        raw = Prompt.ask("\n[bold]player>[/bold]", default="watch 60").strip().lower()
        cmd, _, arg = raw.partition(" ")
        if player.monitor.alert:
            player.dismiss_alert()
        if cmd == "play":
            if not player.play():
                console.print("[red]Cannot play right now.[/red]")
        elif cmd == "pause":
            player.pause()
        elif cmd == "watch":
            player.play()
            player.tick(float(arg or 60))
        elif cmd == "seek":
            if not player.seek(float(arg or 0)):
                console.print("[red]You can't skip past what you have watched.[/red]")
        elif cmd == "skip":
            if not player.skip_forward():
                console.print("[red]You can't skip past what you have watched.[/red]")
        elif cmd == "back":
            player.skip_back()
        elif cmd == "complete":
            before = player.state
            after = player.mark_complete()
            if after == before and isinstance(after, Active) and not player.last_error:
                console.print("[red]Watch the episode to the end first.[/red]")
        elif cmd == "quiz":
            quiz = player.active_quiz
            if quiz is None:
                console.print("[dim]No quiz pending.[/dim]")
                continue
            result = player.submit_quiz(run_quiz_session(quiz))
            if result is not None:
                console.print(f"[bold]Score: {result.score}/{result.total} ({result.percentage:.0f}%)[/bold]")
                if isinstance(player.state, QuizPending):
                    console.print("[yellow]Not passed yet. Try again or close with 'exit'.[/yellow]")
                    if Prompt.ask("Close the quiz for now?", choices=["y", "n"], default="n") == "y":
                        player.close_quiz()
        elif cmd == "episode":
            if not player.select_episode(int(arg or 1) - 1):
                console.print("[red]That episode is locked.[/red]")
        elif cmd == "blur":
            player.visibility_changed(hidden=True)
        elif cmd == "printscreen":
            player.key_pressed("PrintScreen")
        elif cmd == "fav":
            player.toggle_favorite()
        elif cmd == "exit":
            player.close_quiz()
            player.back_to_courses()
            break
        else:
            for name, desc in PLAYER_HELP:
                console.print(f"  [cyan]{name:<20}[/cyan] {desc}")


def cmd_courses(backend: Backend):
    table = Table(title="Courses")
    table.add_column("Course", style="cyan")
    table.add_column("Episodes", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Enrolled")
    for c in backend.get_courses():
        table.add_row(c.title, str(len(c.ordered_episodes())), f"{c.progress}%", "yes" if c.enrolled else "")
    console.print(table)


def cmd_certificates(backend: Backend):
    certificates = backend.get_certificates()
    table = Table(title="Certificates")
    table.add_column("Course")
    table.add_column("Grade")
    table.add_column("Issued")
    table.add_column("Code", style="dim")
    for cert in certificates:
        table.add_row(cert.course_title, cert.grade, cert.issue_date, cert.code)
    console.print(table)

    eligibility = CertificateEligibility(certificates)
    titles = {c.id: c.title for c in backend.get_courses()}
    for course_id in eligibility.refresh(backend.get_course_percentages()):
        label = "the master certificate" if course_id == MASTER_CERT else titles.get(course_id, course_id)
        if Prompt.ask(f"Claim {label}?", choices=["y", "n"], default="y") != "y":
            continue
        try:
            if course_id == MASTER_CERT:
                cert = backend.generate_master_certificate()
            else:
                cert = backend.generate_certificate(course_id)
        except BackendError as e:
            console.print(f"[red]{e}[/red]")
            continue
        console.print(f"[green]Issued {cert.course_title} ({cert.code})[/green]")


def cmd_favorites(backend: Backend):
    titles = {c.id: c.title for c in backend.get_courses()}
    favorites = backend.get_favorites()
    if not favorites:
        console.print("[yellow]No favorites yet.[/yellow]")
    for fav in favorites:
        console.print(f"  [yellow]★[/yellow] {titles.get(fav['target_id'], fav['target_id'])}")


def cmd_import(db_path: str):
    file_path = Prompt.ask("Catalog file path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    counts = import_catalog(db_path, file_path)
    console.print(f"[green]Imported {counts['courses']} courses, {counts['episodes']} episodes, "
                  f"{counts['quizzes']} quizzes[/green]")


def cmd_whoami(db_path: str):
    user_id, role = current_user(db_path)
    console.print(f"Signed in as [bold]{user_id}[/bold] ({role})")
    user_id = Prompt.ask("User id", default=user_id)
    role = Prompt.ask("Role", choices=[ROLE_STUDENT, ROLE_SUPERVISOR, ROLE_ADMIN], default=role)
    set_setting(db_path, "user_id", user_id)
    set_setting(db_path, "role", role)


def main():
    configure_logging(console=console)
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path)
    if first_run:
        console.print("[green]Ready![/green]\n")

    show_welcome()

    while True:
        user_id, role = current_user(db_path)
        backend = Backend(db_path, user_id)
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="courses").strip().lower()
        try:
            if choice == "courses":
                cmd_courses(backend)
            elif choice == "play":
                cmd_play(backend, role)
            elif choice == "certificates":
                cmd_certificates(backend)
            elif choice == "favorites":
                cmd_favorites(backend)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "whoami":
                cmd_whoami(db_path)
            elif choice in ("quit", "exit", "q"):
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
