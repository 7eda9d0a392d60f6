"""Text front end for Eco Quest.

Usage (example):
    python run.py
Then type commands:
    map
    enter forest
    next
    sort paper recycle
"""
from __future__ import annotations
import argparse
import difflib
import logging
import sys
import threading

from config import configure_logging, load_engine_config
from ecoquest import create_engine
from ecoquest.core.errors import EcoQuestError
from ecoquest.core.export import certificate_html, csv_filename, export_csv
from ecoquest.core.ledger import next_badge, unlock_progress
from ecoquest.core.scheduler import ManualScheduler, ThreadScheduler
from ecoquest.minigames import CountdownGame
from ecoquest.quest import commands

logger = logging.getLogger(__name__)

PROMPT = "> "
WATCH_INTERVAL_SECONDS = 0.5

COMMAND_HELP = {
    'map': {'usage': 'map', 'desc': 'Leave the current zone and show the map.'},
    'enter': {'usage': 'enter <zone>', 'desc': 'Start a zone from its first scene.'},
    'next': {'usage': 'next', 'desc': 'Go to the next scene (game scenes must be finished).'},
    'back': {'usage': 'back', 'desc': 'Go back one scene; it restarts fresh.'},
    'look': {'usage': 'look', 'desc': 'Show the current scene again.'},
    'sort': {'usage': 'sort <item> <bin>', 'desc': 'Drop an item into recycle, compost or trash.'},
    'toggle': {'usage': 'toggle <device>', 'desc': 'Switch a device on or off during the energy dash.'},
    'choose': {'usage': 'choose <n>', 'desc': 'Pick an answer of the travel question.'},
    'tick': {'usage': 'tick [seconds]', 'desc': 'Move the clock forward (only with --manual-clock).'},
    'status': {'usage': 'status', 'desc': 'Stars, badge and next goal of the active learner.'},
    'roster': {'usage': 'roster', 'desc': 'List learners, their stars and progress.'},
    'select': {'usage': 'select <id>', 'desc': 'Make a learner active.'},
    'add': {'usage': 'add <name>', 'desc': 'Add a learner to the class.'},
    'rename': {'usage': 'rename <id> <name>', 'desc': 'Rename a learner.'},
    'remove': {'usage': 'remove <id>', 'desc': 'Delete a learner (not the guest).'},
    'class': {'usage': 'class <name>', 'desc': 'Set the class name.'},
    'mission': {'usage': 'mission <all|zone>', 'desc': 'Restrict the class to one zone.'},
    'readaloud': {'usage': 'readaloud', 'desc': 'Toggle read-aloud narration.'},
    'reset': {'usage': 'reset <id|all|class|factory>', 'desc': 'Reset progress or data.'},
    'export': {'usage': 'export', 'desc': 'Write the roster CSV.'},
    'cert': {'usage': 'cert', 'desc': 'Write a certificate for the active learner.'},
    'help': {'usage': 'help', 'desc': 'Show this list.'},
    'quit': {'usage': 'quit | exit', 'desc': 'Leave the game.'},
}


def help_lines():
    lines = ["Available commands:"]
    max_usage = max(len(info['usage']) for info in COMMAND_HELP.values())
    for info in COMMAND_HELP.values():
        lines.append(f" {info['usage'].ljust(max_usage)}  - {info['desc']}")
    return lines


def _print_result(res):
    for line in res["lines"]:
        print(line)
    for hint in res["hints"]:
        print(f"  hint: {hint}")


def _status_lines(engine):
    learner = engine.registry.get_active()
    lines = [
        f"{learner.name}: {learner.stars} stars, score {learner.score}",
        f"Badge: {engine.ledger.current_badge()}",
        f"Gear unlocked: {unlock_progress(learner.stars)}%",
    ]
    upcoming = next_badge(learner.stars)
    if upcoming:
        lines.append(f"Next: {upcoming.icon} {upcoming.name} at {upcoming.stars} stars")
    return lines


def _teacher_command(engine, cmd, arg):
    """Roster and class management commands; returns printable lines."""
    reg = engine.registry
    if cmd == "add":
        learner = reg.create_learner(arg)
        return [f"Added {learner.name} ({learner.id})."]
    if cmd == "rename":
        learner_id, _, name = arg.partition(" ")
        learner = reg.rename_learner(learner_id, name)
        return [f"Renamed to {learner.name}."]
    if cmd == "remove":
        reg.remove_learner(arg)
        return ["Learner removed."]
    if cmd == "class":
        reg.set_class_name(arg)
        return [f"Class name: {reg.settings.class_name or '-'}"]
    if cmd == "mission":
        reg.set_mission(arg)
        return [f"Mission: {reg.settings.mission}"]
    if cmd == "readaloud":
        return [f"Read aloud: {'on' if reg.toggle_read_aloud() else 'off'}"]
    if cmd == "reset":
        engine.sequencer.exit_to_map()
        if arg == "all":
            reg.reset_all_except_guest()
        elif arg == "class":
            reg.reset_class()
        elif arg == "factory":
            reg.factory_reset()
        else:
            reg.reset_learner(arg)
        return ["Reset done."]
    if cmd == "export":
        path = csv_filename(reg.settings.class_name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(export_csv(reg.snapshot, engine.zone_ids))
        return [f"Roster written to {path}"]
    if cmd == "cert":
        learner = reg.get_active()
        path = f"certificate_{learner.id}.html"
        with open(path, "w", encoding="utf-8") as f:
            f.write(certificate_html(learner, reg.settings.class_name))
        return [f"Certificate written to {path}"]
    raise ValueError(f"Not a class command: {cmd}")


TEACHER_COMMANDS = {"add", "rename", "remove", "class", "mission", "readaloud", "reset", "export", "cert"}


def game_loop(manual_clock: bool = False):
    scheduler = ManualScheduler() if manual_clock else ThreadScheduler()
    engine = create_engine(config=load_engine_config(), scheduler=scheduler)
    seq = engine.sequencer
    strict = engine.config.strict
    print("-- Eco Quest started. Type 'help' for the command list. --")
    _print_result(commands.map_command(seq))

    # Reports a countdown that ran out while input() was blocking
    _stop_event = threading.Event()

    def _bg_watcher():
        reported = None
        while not _stop_event.wait(WATCH_INTERVAL_SECONDS):
            with engine.lock:
                game = seq.game
                finished = isinstance(game, CountdownGame) and game.is_complete() and game is not reported
                timed_out = finished and game.outcome().tier == "partial"
            if finished:
                reported = game
                if timed_out:
                    print("\nTime's up! Try again next time.")
                    print(PROMPT, end="", flush=True)

    if not manual_clock:
        threading.Thread(target=_bg_watcher, name="countdown-watcher", daemon=True).start()

    try:
        while True:
            line = input(PROMPT).strip()
            if not line:
                continue
            cmd, _, arg = line.partition(" ")
            cmd = cmd.lower()
            arg = arg.strip()
            with engine.lock:
                try:
                    if cmd in {"quit", "exit"}:
                        seq.exit_to_map()
                        print("Goodbye, Eco Hero!")
                        break
                    elif cmd == "help":
                        for l in help_lines():
                            print(l)
                        continue
                    elif cmd == "map":
                        res = commands.map_command(seq)
                    elif cmd == "enter":
                        res = commands.enter_zone_command(seq, arg)
                    elif cmd == "next":
                        res = commands.advance_command(seq)
                    elif cmd == "back":
                        res = commands.retreat_command(seq)
                    elif cmd == "look":
                        res = commands.scene_command(seq)
                    elif cmd == "sort":
                        item_id, _, category = arg.partition(" ")
                        res = commands.sort_command(seq, item_id, category.strip())
                    elif cmd == "toggle":
                        res = commands.toggle_command(seq, arg)
                    elif cmd == "choose":
                        if not arg.isdigit():
                            print("Usage: choose <n>")
                            continue
                        res = commands.choose_command(seq, int(arg))
                    elif cmd == "tick":
                        if not isinstance(scheduler, ManualScheduler):
                            print("The clock runs by itself; start with --manual-clock to use tick.")
                            continue
                        scheduler.advance(float(arg or 1))
                        res = commands.scene_command(seq)
                    elif cmd == "status":
                        for l in _status_lines(engine):
                            print(l)
                        continue
                    elif cmd == "roster":
                        res = commands.roster_command(engine.registry, engine.zone_ids)
                    elif cmd == "select":
                        res = commands.select_learner_command(engine.registry, arg, strict=strict)
                    elif cmd in TEACHER_COMMANDS:
                        for l in _teacher_command(engine, cmd, arg):
                            print(l)
                        continue
                    else:
                        close = difflib.get_close_matches(cmd, COMMAND_HELP.keys(), n=3)
                        if close:
                            print(f"Unknown command: '{cmd}'. Did you mean: {', '.join(close)}")
                        else:
                            print(f"Unknown command: '{cmd}'. Type 'help' for the list.")
                        continue
                    _print_result(res)
                except (EcoQuestError, ValueError) as e:
                    print(f"[ERROR] {e}")
    finally:
        _stop_event.set()
        logger.debug("CLI session ended")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Eco Quest text adventure")
    parser.add_argument("--manual-clock", action="store_true",
                        help="countdown only moves with the 'tick' command")
    args = parser.parse_args(argv)
    configure_logging()
    try:
        game_loop(manual_clock=args.manual_clock)
    except (EOFError, KeyboardInterrupt):
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
