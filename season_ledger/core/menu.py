"""Interactive numbered menu over a loaded ledger."""

from .models import Ledger, LedgerConfig, MenuAction
from .output_generator import (
    format_average_points, format_driver_points, format_points_ascending,
    format_season, format_total_wins, format_winners,
)
from .validator import InputValidator


MENU_TEXT = """Please select one of the following:
  1 - Display winners and stats from each season
  2 - Display a specific season's stats
  3 - Display total wins per season
  4 - Display average points per season
  5 - Display total points per season ascending
  6 - Display a specific driver's total points
  7 - Quit"""


def run_action(action: MenuAction, ledger: Ledger, config: LedgerConfig,
               validator: InputValidator, read=input, write=print) -> bool:
    """Run one menu action. Returns False when the session should end."""
    write(f'Option {int(action)} selected...')

    if action == MenuAction.WINNERS:
        lines = format_winners(ledger)
    elif action == MenuAction.SEASON:
        write('Please enter the season you want to display:')
        result = validator.validate_season(read())
        lines = format_season(ledger, result.value) if result.ok else [result.error]
    elif action == MenuAction.TOTAL_WINS:
        lines = format_total_wins(ledger)
    elif action == MenuAction.AVERAGE_POINTS:
        lines = format_average_points(ledger, config)
    elif action == MenuAction.POINTS_ASCENDING:
        lines = format_points_ascending(ledger)
    elif action == MenuAction.DRIVER_POINTS:
        write("Please enter the driver you want to display in the format: 'First Last':")
        result = validator.validate_name(read())
        lines = format_driver_points(ledger, result.value) if result.ok else [result.error]
    elif action == MenuAction.QUIT:
        write('Quitting the application...')
        return False
    else:
        raise ValueError(f"Unhandled menu action: {action!r}")

    for line in lines:
        write(line)
    return True


def run_menu(ledger: Ledger, config: LedgerConfig, read=input, write=print):
    """Show the menu and dispatch options until the user quits or input ends."""
    validator = InputValidator(ledger, config.name_policy, menu_size=len(MenuAction))
    write('')
    write('Welcome to the season ledger application!')
    while True:
        write(MENU_TEXT)
        try:
            token = read()
        except EOFError:
            break
        result = validator.validate_menu_option(token)
        if not result.ok:
            write(result.error)
            continue
        try:
            keep_going = run_action(MenuAction(result.value), ledger, config,
                                    validator, read=read, write=write)
        except EOFError:
            break
        if not keep_going:
            break
