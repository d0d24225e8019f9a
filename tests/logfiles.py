"""Helpers for writing EVE-style game logs in tests."""
import os

HEADER = (
    "------------------------------------------------------------\n"
    "  Gamelog\n"
    "  Listener: {name}\n"
    "  Session Started: {started}\n"
    "------------------------------------------------------------\n"
)


def bounty_line(amount: str, ts: str = "2024.01.01 10:05:00") -> str:
    return f"[ {ts} ] (bounty) <font size=12><b><color=0xff00aa00>{amount} ISK</b> added to next bounty payout\n"


def undock_line(station: str = "Jita IV - Moon 4", ts: str = "2024.01.01 10:06:00") -> str:
    return f"[ {ts} ] (None) Undocking from {station} to Jita solar system.\n"


def combat_line(ts: str = "2024.01.01 10:05:30") -> str:
    return f"[ {ts} ] (combat) <color=0xff00ffff><b>120</b> <color=0x77ffffff><font size=10>to</font> <b><color=0xffffffff>Guristas Pirate</b>\n"


def write_log(directory, filename: str, name: str, started: str, body: str = "") -> str:
    path = os.path.join(str(directory), filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write(HEADER.format(name=name, started=started))
        f.write(body)
    return path


def append(path: str, text: str) -> None:
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)
