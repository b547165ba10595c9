"""Simple entrypoint to print today's weather context and styling advice."""

import sys

from mirror_app.app import MirrorApp


def main() -> None:
    user_id = sys.argv[1] if len(sys.argv) > 1 else "local-user"
    app = MirrorApp()
    weather = app.get_current_weather_context(user_id)
    print(f"{weather.location}: {weather.temperature:.0f}°F, {weather.condition.value}, humidity {weather.humidity:.0f}%")
    for suggestion in app.get_weather_based_suggestions(weather):
        print(f"- {suggestion}")


if __name__ == "__main__":
    main()
