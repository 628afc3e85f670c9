"""CLI entry point for geoquiz."""

from __future__ import annotations

import random

import click

from geoquiz.engine.categories import QuizCategory

HINT_COMMAND = "?"
SKIP_COMMAND = "!skip"
QUIT_COMMAND = "!quit"


@click.group(invoke_without_command=True)
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """geoquiz: geography trivia in the terminal."""
    from geoquiz.config.settings import Settings
    from geoquiz.logging_config import configure_logging

    settings = Settings.load()
    configure_logging(log_level or settings.get_log_level())
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(play)


@main.command()
@click.option(
    "--category",
    type=click.Choice([c.value for c in QuizCategory]),
    default=QuizCategory.COUNTRY_TO_CAPITAL.value,
    show_default=True,
)
@click.option("--questions", "-n", type=int, default=10, show_default=True,
              help="Number of questions before the game ends (0 = until !quit)")
@click.option("--continent", default=None, help="Only ask about one continent")
@click.option("--seed", type=int, default=None, help="Seed the question order")
@click.pass_context
def play(
    ctx: click.Context,
    category: str,
    questions: int,
    continent: str | None,
    seed: int | None,
) -> None:
    """Play a game in the terminal."""
    from geoquiz.data.registry import CountryRegistry
    from geoquiz.engine.session import SessionController
    from geoquiz.errors import DataError

    settings = ctx.obj["settings"]
    controller = SessionController(
        registry=CountryRegistry(settings.data_file),
        settings=settings,
        rng=random.Random(seed) if seed is not None else None,
    )
    try:
        controller.start(QuizCategory(category), continent=continent)
    except DataError as e:
        raise click.BadParameter(str(e), param_hint="--continent") from e
    click.echo(f"Type your answer. '{HINT_COMMAND}' for a hint, "
               f"'{SKIP_COMMAND}' to skip, '{QUIT_COMMAND}' to stop.\n")

    while True:
        if not _play_question(controller):
            break
        click.echo(controller.progress_summary())
        for note in controller.achievements():
            click.echo(f"  {note}")
        click.echo("")

        if questions and controller.game_state().total_questions >= questions:
            break
        controller.next_question()

    summary = controller.end_game()
    click.echo(f"\nGame over: {summary.final_score}/{summary.max_possible_score} points")
    click.echo(controller.ledger.summary_text())


def _play_question(controller) -> bool:
    """Run one question to completion. Returns False if the player quit."""
    view = controller.current_question()
    state = controller.game_state()
    click.echo(f"Q{state.total_questions}. {view.question_text}")

    while True:
        answer = click.prompt(">", default="", show_default=False, prompt_suffix=" ")
        command = answer.strip().lower()

        if command == QUIT_COMMAND:
            return False
        if command == HINT_COMMAND:
            hint = controller.request_hint()
            click.echo(f"  Hint: {hint}" if hint else "  No more hints available!")
            continue
        if command == SKIP_COMMAND:
            correct = controller.skip_question()
            click.echo(f"  Skipped. The answer was {correct}.")
            _echo_trivia(controller)
            return True

        result = controller.submit_answer(answer)
        if result.is_correct:
            click.echo(f"  {result.message} +{result.points_awarded} points")
            _echo_trivia(controller)
            return True
        click.echo(f"  {result.message}")


def _format_number(value) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def _trivia_lines(country) -> list[str]:
    lines = [
        f"Capital: {country.capital}",
        f"Continent: {country.continent}",
        f"Sub-continent: {country.sub_region}",
        f"Population: {_format_number(country.population)}",
        f"Main Language: {country.language}",
        f"Currency: {country.currency}",
        f"Area: {_format_number(country.area)} km²",
    ]
    if country.airport:
        lines.append(f"Main Airport: {country.airport}")
    return lines


def _echo_trivia(controller) -> None:
    country = controller.current_question().country
    click.echo(f"  {country.flag} About {country.name}:")
    for line in _trivia_lines(country):
        click.echo(f"    {line}")


@main.command()
@click.option("--continent", default=None, help="Filter by continent")
@click.option("--search", default=None, help="Match name, capital, continent or language")
@click.pass_context
def countries(ctx: click.Context, continent: str | None, search: str | None) -> None:
    """List the countries in the quiz table."""
    from geoquiz.data.registry import CountryRegistry

    registry = CountryRegistry(ctx.obj["settings"].data_file)
    selected = registry.search(search) if search else registry.all()
    if continent:
        selected = [c for c in selected if c.continent.lower() == continent.lower()]
    if not selected:
        click.echo("No countries found.")
    for country in selected:
        click.echo(f"  {country.flag} {country.name}: {country.capital} ({country.continent})")


@main.command()
@click.argument("name")
@click.pass_context
def country(ctx: click.Context, name: str) -> None:
    """Show everything the quiz table knows about one country."""
    from geoquiz.data.registry import CountryRegistry

    registry = CountryRegistry(ctx.obj["settings"].data_file)
    found = registry.get(name)
    if found is None:
        raise click.BadParameter(f"Unknown country: {name}", param_hint="NAME")
    click.echo(f"{found.flag} {found.name}")
    for line in _trivia_lines(found):
        click.echo(f"  {line}")


@main.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the JSON-lines controller on stdin/stdout."""
    import asyncio

    from geoquiz.server.__main__ import serve as serve_lines

    asyncio.run(serve_lines(ctx.obj["settings"]))
