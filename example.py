"""Example: newspaper subscriptions on an in-process event registry."""

from eventbus import Registry


def magazine() -> None:
    print("received the daily magazine")


def main() -> None:
    registry = Registry.from_settings()

    registry.subscribe("daily", magazine)
    paper_id = registry.subscribe("daily", lambda: print("received the daily paper"))
    registry.subscribe_once("monthly", lambda issue: print(f"received monthly issue {issue}"))

    registry.publish("daily")
    registry.publish("monthly", 1)
    registry.publish("monthly", 2)

    registry.unsubscribe("daily", magazine)
    registry.publish("daily")

    registry.unsubscribe("daily", paper_id)
    registry.publish("daily")

    print(registry.metrics.snapshot())


if __name__ == "__main__":
    main()
