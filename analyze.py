#!/usr/bin/env python3
"""Command-line runner for NutriChef AI.

Analyze a food photo and print a recipe with nutrition estimates.

Usage:
    python analyze.py images/pasta.jpg
    python analyze.py --servings 4 images/pasta.jpg
    python analyze.py --json images/pasta.jpg     # Print the recipe as JSON
    python analyze.py --debug images/pasta.jpg    # Verbose logging

Features:
- Serving-scaled ingredient quantities and total calories
- Nutrients and ingredients rendered as tables, steps as a numbered list
- JSON output for scripting
- Exit status 1 with a readable message on any failure
"""

import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.models.models import RecipeDetails
from src.session.session import AnalysisSession
from src.utils.errors import RecipeAnalysisError
from src.utils.images import load_image_file
from src.utils.logger import logger, set_log_level

console = Console()

USAGE = "Usage: python analyze.py [--servings N] [--json] [--debug] IMAGE_PATH"


def render_recipe(recipe: RecipeDetails, mismatch: bool = False) -> None:
    """Print a recipe to the console with rich formatting."""
    header = f"[bold]{recipe.dish_name}[/bold]"
    if recipe.description:
        header += f"\n[dim]{recipe.description}[/dim]"
    console.print(Panel(header, border_style="green" if recipe.is_identified else "yellow"))

    if not recipe.is_identified:
        console.print("[yellow]The photo could not be identified as a dish.[/yellow]")

    facts = [f"Servings: {recipe.servings}"]
    if recipe.preparation_time:
        facts.append(f"Prep: {recipe.preparation_time}")
    if recipe.cooking_time:
        facts.append(f"Cook: {recipe.cooking_time}")
    console.print(" | ".join(facts))
    if mismatch:
        console.print("[yellow]Note: the recipe was scaled to a different serving count than requested.[/yellow]")

    total = recipe.estimated_total_calories()
    calories = f"Calories: [bold]{recipe.calories_per_serving}[/bold] kcal per serving"
    if total:
        calories += f", {total} kcal total"
    console.print(calories)

    if recipe.nutrients_per_serving:
        nutrients = Table(title="Nutrition per serving", title_justify="left")
        nutrients.add_column("Nutrient")
        nutrients.add_column("Amount", justify="right")
        nutrients.add_column("% DV", justify="right")
        for nutrient in recipe.nutrients_per_serving:
            daily = f"{nutrient.percent_daily_value}%" if nutrient.percent_daily_value else ""
            nutrients.add_row(nutrient.name, f"{nutrient.amount} {nutrient.unit}", daily)
        console.print(nutrients)

    if recipe.ingredients:
        ingredients = Table(title=f"Ingredients ({recipe.servings} servings)", title_justify="left")
        ingredients.add_column("Ingredient")
        ingredients.add_column("Quantity", justify="right")
        ingredients.add_column("Notes", style="dim")
        for ingredient in recipe.ingredients:
            ingredients.add_row(ingredient.name, f"{ingredient.quantity} {ingredient.unit}", ingredient.notes or "")
        console.print(ingredients)

    if recipe.preparation_steps:
        console.print("[bold]Preparation[/bold]")
        for number, step in enumerate(recipe.preparation_steps, start=1):
            console.print(f"  {number}. {step}")

    console.print()
    console.print("[dim]Powered by AI. Nutritional information is an estimate.[/dim]")


async def run_analysis(image_path: str, servings: Optional[str] = None, as_json: bool = False) -> int:
    """Upload, submit and display one analysis.

    Args:
        image_path: Path to the food photo.
        servings: Serving count as typed by the user, or None for the configured default.
        as_json: Print the recipe as camelCase JSON instead of tables.

    Returns:
        Process exit status (0 on success, 1 on any failure).
    """
    session = AnalysisSession()

    try:
        image = load_image_file(image_path)
    except RecipeAnalysisError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return 1

    await session.upload_image(image)
    if servings is not None:
        session.set_serving_count(servings)

    if session.error is None:
        with console.status("Analyzing your image... This may take a moment."):
            await session.submit()

    if session.error is not None:
        console.print(f"[red]✗ {session.error_message}[/red]")
        return 1

    if as_json:
        console.print_json(session.recipe.model_dump_json(by_alias=True))
    else:
        render_recipe(session.recipe, mismatch=session.servings_mismatch)
    return 0


def main(argv: list[str]) -> int:
    as_json = False
    servings = None
    image_path = None
    index = 0

    while index < len(argv):
        arg = argv[index]
        if arg == "--json":
            as_json = True
        elif arg == "--debug":
            set_log_level(logging.DEBUG)
        elif arg == "--servings":
            index += 1
            if index >= len(argv):
                print("Error: --servings flag requires a number")
                return 1
            servings = argv[index]
        elif arg.startswith("--"):
            print(f"Unknown flag: {arg}")
            return 1
        elif image_path is None:
            image_path = arg
        else:
            print("Error: only one image can be analyzed at a time")
            return 1
        index += 1

    if image_path is None:
        print(USAGE)
        return 1

    try:
        return asyncio.run(run_analysis(image_path, servings, as_json=as_json))
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user.")
        return 130


def cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
