#!/usr/bin/env python3
"""
CogTrain - Main CLI Entry Point

Command-line interface for inspecting and exercising the adaptive
difficulty bandits of the cognitive-training games.
"""

import logging
import random
import sys
from dataclasses import replace
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich import box

from cogtrain import __version__
from cogtrain.bandits import (
    BanditRegistry,
    GameContext,
    JsonFileStore,
    actions_for_level,
    difficulty_band,
    get_bandit_config,
)
from cogtrain.games import GAME_PROFILES
from cogtrain.simulation import SyntheticPlayer, simulate_session

console = Console()

GAME_CHOICE = click.Choice(list(GAME_PROFILES.keys()))


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; debug detail only with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _registry(ctx: click.Context, seed: Optional[int] = None) -> BanditRegistry:
    config = get_bandit_config()
    store_dir = ctx.obj.get("store_dir")
    if store_dir:
        config = replace(config, store_dir=store_dir)
    rng = random.Random(seed) if seed is not None else None
    return BanditRegistry(config=config, store=JsonFileStore(config.store_dir), rng=rng)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False),
    help="Directory holding bandit state files (default: COGTRAIN_BANDIT_STORE_DIR or kb/bandits/)"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show debug logging from the bandits"
)
@click.pass_context
def cli(ctx: click.Context, store_dir: Optional[str], verbose: bool):
    """
    CogTrain - Adaptive difficulty for cognitive-training games.

    Each game keeps an epsilon-greedy contextual bandit that picks level
    parameters and learns from the player's results.
    """
    ctx.ensure_object(dict)
    ctx.obj["store_dir"] = store_dir
    configure_logging(verbose)


@cli.command()
def games():
    """
    List all game presets.
    """
    table = Table(title="Games", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Actions", justify="right")
    table.add_column("Features", justify="right")
    table.add_column("Max reward", justify="right")

    for name, profile in GAME_PROFILES.items():
        table.add_row(
            name,
            profile.title,
            str(len(profile.generate_actions())),
            str(profile.features.dimension),
            f"{profile.reward_weights.max_positive:.0f}",
        )

    console.print(table)


@cli.command()
@click.argument("game", type=GAME_CHOICE)
@click.option(
    "--level",
    "-l",
    type=click.IntRange(1, 25),
    default=1,
    help="Level to show candidates for (default: 1)"
)
def actions(game: str, level: int):
    """
    Show the candidate actions of a level.
    """
    profile = GAME_PROFILES[game]
    candidates = actions_for_level(profile.generate_actions(), level)
    low, high = difficulty_band(level)

    if not candidates:
        click.echo(f"No actions in band [{low:.2f}, {high:.2f}] for level {level}.")
        return

    table = Table(
        title=f"{profile.title}: level {level} (band {low:.2f}-{high:.2f})",
        box=box.SIMPLE,
    )
    table.add_column("Key", style="cyan")
    table.add_column("Variation", justify="right")
    table.add_column("Multiplier", justify="right")
    table.add_column("Parameters")

    for action in candidates:
        params = ", ".join(f"{k}={v}" for k, v in action.params.items())
        table.add_row(action.key, str(action.variation), f"{action.difficulty_multiplier:.2f}", params)

    console.print(table)


@cli.command()
@click.argument("game", type=GAME_CHOICE)
@click.pass_context
def stats(ctx: click.Context, game: str):
    """
    Show persisted statistics of a game's bandit.
    """
    bandit = _registry(ctx).get(game)
    data = bandit.get_stats()
    profile = data["profile"]

    table = Table(title=f"{GAME_PROFILES[game].title} bandit", box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Total pulls", str(data["total_pulls"]))
    table.add_row("Epsilon", f"{data['epsilon']:.4f}")
    table.add_row("Skill level", f"{data['skill_level']:.3f}")
    table.add_row("Arms pulled", str(data["arms_pulled"]))
    table.add_row("Best arm", data["best_arm"] or "-")
    table.add_row("Preferred difficulty", f"{profile['preferred_difficulty']:.3f}")
    table.add_row("Adaptation speed", str(profile["adaptation_speed"]))
    table.add_row("Best time of day", str(profile["best_time_of_day"]))
    table.add_row("Schema version", data["schema_version"])
    table.add_row("Freeze mode", str(data["freeze_mode"]))
    console.print(table)

    if bandit.history:
        click.echo(bandit.performance_insight(GameContext()))


@cli.command()
@click.argument("game", type=GAME_CHOICE)
@click.option(
    "--yes",
    is_flag=True,
    help="Do not ask for confirmation"
)
@click.pass_context
def reset(ctx: click.Context, game: str, yes: bool):
    """
    Forget everything a game's bandit has learned.
    """
    if not yes:
        click.confirm(f"Reset learned state for {game}?", abort=True)

    registry = _registry(ctx)
    registry.reset(game)
    click.echo(f"Reset bandit state for {game}")


@cli.command()
@click.argument("game", type=GAME_CHOICE)
@click.option(
    "--levels",
    "-n",
    type=click.IntRange(1, 10000),
    default=30,
    help="Number of levels to play (default: 30)"
)
@click.option(
    "--skill",
    "-s",
    type=click.FloatRange(0.0, 1.0),
    default=0.5,
    help="Underlying skill of the synthetic player, 0-1 (default: 0.5)"
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducible runs"
)
@click.option(
    "--start-level",
    type=click.IntRange(1, 25),
    default=1,
    help="Level to start from (default: 1)"
)
@click.pass_context
def simulate(ctx: click.Context, game: str, levels: int, skill: float, seed: Optional[int], start_level: int):
    """
    Drive a game's bandit with a synthetic player.

    State is persisted to the store like a real session.
    """
    registry = _registry(ctx, seed=seed)
    bandit = registry.get(game)
    player = SyntheticPlayer(
        skill=skill,
        reference_time_ms=bandit.game.reward_weights.reference_time_ms,
        rng=random.Random(None if seed is None else seed + 1),
    )

    try:
        trajectory = simulate_session(bandit, player, levels, start_level=start_level)
    except Exception as e:
        click.echo(f"❌ Simulation failed: {e}", err=True)
        sys.exit(1)

    table = Table(title=f"{bandit.game.title}: skill {skill:.2f}", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Done")
    table.add_column("Accuracy", justify="right")
    table.add_column("Reward", justify="right")
    table.add_column("Next", justify="right")

    for i, step in enumerate(trajectory, 1):
        table.add_row(
            str(i),
            str(step["level"]),
            step["action"],
            "yes" if step["completed"] else "no",
            f"{step['accuracy']:.2f}",
            f"{step['reward']:.1f}",
            str(step["next_level"]),
        )

    console.print(table)
    click.echo(f"Final level: {trajectory[-1]['next_level']}")
    click.echo(f"Epsilon: {bandit.epsilon:.4f}")


if __name__ == "__main__":
    cli()
