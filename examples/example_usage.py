"""Example: drive a tab session without Flask.

Shows the lifecycle controller expiring an idle session on a manual clock.
"""

import jwt

from src.medhir_portal.medhir_portal.core.enums import ActivityEvent
from src.medhir_portal.medhir_portal.session.manager import SessionManager, SessionSettings
from src.medhir_portal.medhir_portal.session.scheduling import EventSource, ManualScheduler
from src.medhir_portal.medhir_portal.storage.memory_storage import InMemoryStorage


def main():
    scheduler = ManualScheduler()
    clock_ms = {"now": 1_700_000_000_000}

    manager = SessionManager(
        InMemoryStorage(),
        settings=SessionSettings(inactivity_threshold_ms=5 * 60 * 1000, check_interval_seconds=60),
        now_ms=lambda: clock_ms["now"],
        now_seconds=lambda: clock_ms["now"] // 1000,
    )
    token = jwt.encode({"sub": "EMP-1", "exp": clock_ms["now"] // 1000 + 3600, "roles": ["EMPLOYEE"]}, "demo", algorithm="HS256")
    manager.begin(token, attributes={"employeeId": "EMP-1", "currentRole": "EMPLOYEE"})

    events = EventSource()

    def tick(seconds: int) -> None:
        clock_ms["now"] += seconds * 1000
        scheduler.advance(seconds)

    with manager.controller(events=events, scheduler=scheduler, on_logout=lambda: print("logged out")) as controller:
        events.emit(ActivityEvent.CLICK)
        tick(4 * 60)
        print("after 4 idle minutes:", controller.state.value)
        tick(2 * 60)
        print("after 6 idle minutes:", controller.state.value, controller.expiry_reason)


if __name__ == "__main__":
    main()
