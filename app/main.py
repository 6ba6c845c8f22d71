from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from pathlib import Path

import os
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nicegui import ui
import nicegui.run as ng_run

from logging_config import setup_logging
from models import Decision
from scoring.core import MAX_SCORING_SCALE, MAX_WEIGHT, MIN_SCORING_SCALE
from scoring.ranking import max_weight, rank_options, refresh_results, score_breakdown
from storage import StorageError, delete_decision, list_decisions, load_decision, save_decision

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    decision: Decision


state = AppState(decision=Decision(title="Untitled"))


def as_int(value: float | None, default: int = 0) -> int:
    if value is None or not math.isfinite(value):
        return default
    return int(round(value))


def rescore() -> None:
    refresh_results(state.decision)


def refresh_all() -> None:
    rescore()
    criteria_view.refresh()
    options_view.refresh()
    results_view.refresh()


def add_criterion(name: str) -> None:
    try:
        state.decision.add_criterion(name, weight=as_int(weight_input.value, 1))
    except ValueError as exc:
        ui.notify(str(exc))
        return
    refresh_all()


def remove_criterion(name: str) -> None:
    state.decision.remove_criterion(name)
    refresh_all()


def update_weight(name: str, value: float | None) -> None:
    if value is None:
        return
    state.decision.set_weight(name, as_int(value, 1))
    refresh_all()


def add_option(name: str) -> None:
    try:
        state.decision.add_option(name)
    except ValueError as exc:
        ui.notify(str(exc))
        return
    rescore()
    options_view.refresh()
    results_view.refresh()


def remove_option(name: str) -> None:
    state.decision.remove_option(name)
    rescore()
    options_view.refresh()
    results_view.refresh()


def update_rating(option: str, criterion: str, value: float | None) -> None:
    try:
        state.decision.set_rating(option, criterion, as_int(value))
    except KeyError:
        logger.warning("Rating for unknown option or criterion: %s / %s", option, criterion)
        return
    rescore()
    results_view.refresh()


def update_scale(value: float | None) -> None:
    if value is None:
        return
    state.decision.set_scoring_scale(as_int(value, MIN_SCORING_SCALE))
    rescore()
    options_view.refresh()
    results_view.refresh()


def recompute_results() -> None:
    decision = state.decision
    if not decision.options:
        ui.notify("Add at least one option to score.")
        return
    if not decision.criteria:
        ui.notify("Add at least one criterion to score.")
        return
    decision.results = rank_options(decision)
    results_view.refresh()


def save_current() -> None:
    path = save_decision(state.decision)
    ui.notify(f"Saved to {path}")
    refresh_saved_decisions()


def load_named(name: str | None) -> None:
    if not name:
        ui.notify("Choose a decision to load.")
        return
    try:
        loaded = load_decision(name)
    except StorageError as exc:
        logger.error("Failed to load decision: %s", exc)
        ui.notify(f"Could not read {exc.path}")
        return
    if loaded is None:
        ui.notify("Decision not found on disk.")
        return
    state.decision = loaded
    title_input.value = loaded.title
    description_input.value = loaded.description or ""
    scale_input.value = loaded.scoring_scale
    refresh_all()
    ui.notify(f"Loaded {loaded.title}")


def delete_named(name: str | None) -> None:
    if not name:
        ui.notify("Choose a decision to delete.")
        return
    if delete_decision(name):
        ui.notify(f"Deleted {name}")
    refresh_saved_decisions()


def refresh_saved_decisions() -> None:
    saved_select.options = list_decisions()
    saved_select.value = None
    saved_select.update()


ui.page_title("Decision Scoring")

with ui.column().classes("w-full max-w-6xl mx-auto p-6"):
    ui.label("Decision Scoring").classes("text-3xl font-semibold")
    ui.label("Rate options against weighted criteria and rank them by weighted score.").classes(
        "text-gray-500"
    )

    with ui.card().classes("w-full"):
        ui.label("Decision").classes("text-lg font-semibold")
        with ui.row().classes("items-center"):
            title_input = ui.input("Title", value=state.decision.title)

            def on_title_change(event) -> None:
                state.decision.title = (event.value or "").strip() or "Untitled"

            title_input.on_value_change(on_title_change)
            description_input = ui.input("Description", value=state.decision.description or "")

            def on_description_change(event) -> None:
                state.decision.description = (event.value or "").strip() or None

            description_input.on_value_change(on_description_change)
            scale_input = ui.number(
                "Scoring scale",
                value=state.decision.scoring_scale,
                min=MIN_SCORING_SCALE,
                max=MAX_SCORING_SCALE,
                step=1,
                format="%d",
                on_change=lambda e: update_scale(e.value),
            )
            ui.button("Save", on_click=save_current)

        with ui.row().classes("items-center"):
            saved_select = ui.select(options=list_decisions(), label="Saved decisions")
            ui.button("Load", on_click=lambda: load_named(saved_select.value))
            ui.button("Delete", on_click=lambda: delete_named(saved_select.value)).props("outline color=negative")
            ui.button("Refresh list", on_click=refresh_saved_decisions)

    with ui.stepper().classes("w-full") as stepper:
        with ui.step("1. Criteria"):
            with ui.card().classes("w-full"):
                ui.label("Add criteria").classes("text-lg font-semibold")
                with ui.row().classes("items-center"):
                    criterion_input = ui.input("Criterion name")
                    weight_input = ui.number("Weight", value=1, min=1, max=MAX_WEIGHT, step=1, format="%d")

                    def submit_criterion() -> None:
                        add_criterion(criterion_input.value)
                        criterion_input.set_value("")

                    criterion_input.on("keydown.enter", lambda: submit_criterion())
                    ui.button("Add", on_click=submit_criterion)

                @ui.refreshable
                def criteria_view() -> None:
                    if not state.decision.criteria:
                        ui.label("No criteria yet.").classes("text-gray-500")
                        return
                    ui.label(f"Heaviest weight: {max_weight(state.decision.criteria)}").classes(
                        "text-sm text-gray-500"
                    )
                    with ui.column().classes("gap-2"):
                        for criterion in state.decision.criteria:
                            with ui.row().classes("items-center justify-between"):
                                ui.label(criterion.name).classes("w-48")
                                ui.number(
                                    value=criterion.weight,
                                    min=1,
                                    max=MAX_WEIGHT,
                                    step=1,
                                    format="%d",
                                    on_change=lambda e, name=criterion.name: update_weight(name, e.value),
                                ).props("dense")
                                ui.button(
                                    "Remove", on_click=lambda name=criterion.name: remove_criterion(name)
                                ).props("outline color=negative")

                criteria_view()

                with ui.stepper_navigation():
                    ui.button("Next", on_click=stepper.next)

        with ui.step("2. Options & Ratings"):
            with ui.card().classes("w-full"):
                ui.label("Add options").classes("text-lg font-semibold")
                with ui.row().classes("items-center"):
                    option_input = ui.input("Option name")

                    def submit_option() -> None:
                        add_option(option_input.value)
                        option_input.set_value("")

                    option_input.on("keydown.enter", lambda: submit_option())
                    ui.button("Add", on_click=submit_option)

                @ui.refreshable
                def options_view() -> None:
                    decision = state.decision
                    if not decision.criteria:
                        ui.label("Add criteria before rating options.").classes("text-gray-500")
                        return
                    if not decision.options:
                        ui.label("No options yet.").classes("text-gray-500")
                        return
                    ui.label(f"Ratings from 1 to {decision.scoring_scale} (0 = not rated)").classes(
                        "text-sm text-gray-500"
                    )
                    option_col_width = 220
                    rating_col_width = 140
                    action_col_width = 110
                    min_width = option_col_width + (len(decision.criteria) * rating_col_width) + action_col_width
                    grid_template = (
                        f"grid-template-columns: {option_col_width}px "
                        f"repeat({len(decision.criteria)}, {rating_col_width}px) {action_col_width}px;"
                    )

                    with ui.element("div").classes("w-full overflow-x-auto").style("max-width: 100%;"):
                        with ui.column().classes("gap-2"):
                            with ui.element("div").style(
                                f"display: grid; {grid_template} align-items: center; gap: 12px; min-width: {min_width}px;"
                            ):
                                ui.label("Option")
                                for criterion in decision.criteria:
                                    ui.label(f"{criterion.name} (x{criterion.weight})").classes("text-center").style(
                                        "justify-self: center;"
                                    )
                                ui.label("")
                            for option in decision.options:
                                with ui.element("div").style(
                                    f"display: grid; {grid_template} align-items: center; gap: 12px; min-width: {min_width}px;"
                                ):
                                    with ui.column().classes("gap-0 pr-2"):
                                        if option.image_url:
                                            ui.image(option.image_url).classes("w-16")
                                        ui.label(option.name).classes("break-words")
                                        if option.internet_rating is not None:
                                            ui.label(f"Online rating {option.internet_rating:.1f} / 5").classes("text-xs text-gray-500")
                                    for criterion in decision.criteria:
                                        ui.number(
                                            value=option.ratings.get(criterion.name, 0),
                                            min=0,
                                            max=decision.scoring_scale,
                                            step=1,
                                            format="%d",
                                            on_change=lambda e, o=option.name, c=criterion.name: update_rating(
                                                o, c, e.value
                                            ),
                                        ).classes("w-full").props('input-class="text-center" dense')
                                    ui.button(
                                        "Remove", on_click=lambda name=option.name: remove_option(name)
                                    ).props("outline color=negative").classes("w-full")

                options_view()

                with ui.stepper_navigation():
                    ui.button("Back", on_click=stepper.previous).props("flat")
                    ui.button("Next", on_click=stepper.next)

        with ui.step("3. Results"):
            with ui.card().classes("w-full"):
                ui.label("Ranking").classes("text-lg font-semibold")
                ui.button("Recompute results", on_click=recompute_results)

                @ui.refreshable
                def results_view() -> None:
                    decision = state.decision
                    if not decision.results:
                        ui.label("No results yet.").classes("text-gray-500")
                        return
                    with ui.column().classes("gap-2"):
                        for result in decision.results:
                            ui.label(f"{result.option}: {result.score:.4f}")
                    if not decision.criteria or not decision.options:
                        return
                    ui.label("Per-criterion scores").classes("text-md font-semibold pt-4")
                    breakdown = score_breakdown(decision)
                    columns = [{"name": "option", "label": "Option", "field": "option", "align": "left"}]
                    columns += [
                        {"name": criterion.name, "label": criterion.name, "field": criterion.name}
                        for criterion in decision.criteria
                    ]
                    rows = []
                    for row_index, option in enumerate(decision.options):
                        row = {"option": option.name}
                        for col_index, criterion in enumerate(decision.criteria):
                            value = breakdown[row_index, col_index]
                            row[criterion.name] = "-" if math.isnan(value) else f"{value:.3f}"
                        rows.append(row)
                    ui.table(columns=columns, rows=rows, row_key="option").classes("w-full")

                results_view()

                with ui.stepper_navigation():
                    ui.button("Back", on_click=stepper.previous).props("flat")
                    ui.button("Save", on_click=save_current)


setup_logging(getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
ng_run.setup = lambda: None
host = os.getenv("HOST", "127.0.0.1")
port = int(os.getenv("PORT", "8080"))
ui.run(reload=False, host=host, port=port)
