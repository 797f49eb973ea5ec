"""Typed confirmation before destructive work."""

import logging
from collections.abc import Callable
from collections.abc import Sequence

import typer

from rcsetup import output
from rcsetup.config import PALETTE
from rcsetup.models import GateMode
from rcsetup.models import GateResult

_logger = logging.getLogger(__name__)

STRICT_FIRST_ANSWER = "SIM"
STRICT_SECOND_ANSWER = "CONFIRMO"


def read_answer(text: str) -> str:
    """Prompt for one line of input. End of input counts as an empty answer."""
    try:
        return typer.prompt(text, default="", show_default=False)
    except typer.Abort:
        typer.echo()
        return ""


class ConfirmationGate:
    """Gate irreversible actions behind a typed confirmation.

    Simple mode accepts only ``y``/``Y``. Strict mode requires the exact
    lines ``SIM`` and then ``CONFIRMO``; the second prompt is never shown
    if the first answer is wrong.
    """

    def __init__(self, ask: Callable[[str], str] = read_answer):
        self._ask = ask

    def confirm(
        self, mode: GateMode, teardown_items: Sequence[str] = ()
    ) -> GateResult:
        """Ask the user to confirm.

        Args:
            mode: SIMPLE for a y/N prompt, STRICT for the two typed phrases
            teardown_items: What a STRICT confirmation lists as at stake

        Returns:
            CONFIRMED only for an exact affirmative answer, else CANCELLED
        """
        if mode is GateMode.STRICT:
            result = self._confirm_strict(teardown_items)
        else:
            result = self._confirm_simple()
        _logger.debug("Confirmation gate (%s): %s", mode.name, result.name)
        return result

    def _confirm_simple(self) -> GateResult:
        typer.secho("⚠️  WARNING: ", fg=PALETTE.warning, nl=False)
        typer.echo("this will remove the compiler executable from the system.")
        typer.echo()
        answer = self._ask("Are you sure you want to continue? (y/N)")
        if answer.strip().lower() == "y":
            return GateResult.CONFIRMED
        return GateResult.CANCELLED

    def _confirm_strict(self, teardown_items: Sequence[str]) -> GateResult:
        output.print_teardown_warning(teardown_items)
        answer = self._ask(
            f"Are you ABSOLUTELY sure? (type '{STRICT_FIRST_ANSWER}' to confirm)"
        )
        if answer != STRICT_FIRST_ANSWER:
            return GateResult.CANCELLED

        output.print_last_chance()
        answer = self._ask(
            f"Confirm complete uninstall? (type '{STRICT_SECOND_ANSWER}')"
        )
        if answer != STRICT_SECOND_ANSWER:
            return GateResult.CANCELLED
        return GateResult.CONFIRMED
