import threading
from decimal import Decimal

from bountycounter.ledger import Ledger


def test_attribute_and_same_path_noop():
    led = Ledger()
    ent = led.attribute("Alice", "/logs/a.txt", 120)
    assert ent is not None and ent.read_offset == 120
    assert ent.lifetime_total == 0 and ent.session_total == 0
    assert led.attribute("Alice", "/logs/a.txt", 500) is None
    assert led.get("Alice").read_offset == 120


def test_new_path_keeps_session_total_and_clears_lifetime():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 0)
    led.record_reward("Alice", "/logs/a.txt", Decimal("100.50"))
    ent = led.attribute("Alice", "/logs/b.txt", 40)
    assert ent.source_path == "/logs/b.txt"
    assert ent.read_offset == 40
    assert ent.lifetime_total == 0
    assert ent.session_total == Decimal("100.50")


def test_reward_undock_and_reset():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 0)
    snap = led.record_reward("Alice", "/logs/a.txt", Decimal("10"))
    assert snap.lifetime_total == 10 and snap.session_total == 10
    snap = led.record_undock("Alice", "/logs/a.txt")
    assert snap.lifetime_total == 0 and snap.session_total == 10
    led.record_reward("Alice", "/logs/a.txt", Decimal("5"))
    assert led.reset_total("Alice").lifetime_total == 0
    assert led.get("Alice").session_total == 15
    assert led.reset_total("Nobody") is None


def test_updates_for_superseded_path_are_dropped():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 0)
    led.attribute("Alice", "/logs/b.txt", 0)
    assert led.record_reward("Alice", "/logs/a.txt", Decimal("1")) is None
    assert led.commit_offset("Alice", "/logs/a.txt", 99) is False
    assert led.get("Alice").read_offset == 0


def test_offset_is_monotonic():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 50)
    assert led.commit_offset("Alice", "/logs/a.txt", 80) is True
    assert led.commit_offset("Alice", "/logs/a.txt", 60) is False
    assert led.get("Alice").read_offset == 80


def test_reads_are_copies():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 0)
    copy = led.get("Alice")
    copy.lifetime_total = Decimal("999")
    assert led.get("Alice").lifetime_total == 0
    assert led.find_by_path("/logs/a.txt").name == "Alice"
    assert led.find_by_path("/logs/x.txt") is None
    assert led.names() == ["Alice"]
    assert len(led) == 1


def test_concurrent_rewards_and_resets_keep_session_sum():
    led = Ledger()
    led.attribute("Alice", "/logs/a.txt", 0)
    per_thread = 500

    def add_rewards():
        for _ in range(per_thread):
            led.record_reward("Alice", "/logs/a.txt", Decimal("1.25"))

    def reset_often():
        for _ in range(per_thread):
            led.reset_total("Alice")

    threads = [threading.Thread(target=add_rewards) for _ in range(4)]
    threads += [threading.Thread(target=reset_often) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ent = led.get("Alice")
    assert ent.session_total == Decimal("1.25") * per_thread * 4
    assert 0 <= ent.lifetime_total <= ent.session_total
