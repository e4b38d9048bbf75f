"""
Demo: a wall clock with two stepper-driven pointers.

Both pointers must point at 12 o'clock when the script starts. The hours
pointer follows the hour of the local time, the minutes pointer follows the
minutes (a full revolution of the minutes pointer is one hour, so the minutes
are mapped onto the 12-hour dial). The pointers are updated every minute.
Press Ctrl+C to quit; the coils are released on exit.
"""
from pathlib import Path
from datetime import datetime
import time

from pyberrydial import WorldScheduler, load_config, setup_logging
from pyberrydial.motion import ProfileEasing, ProfileType


CONFIG_FILE = Path(__file__).parent / "dial.toml"


def main():
    config = load_config(CONFIG_FILE)
    logger = setup_logging(config)
    world = WorldScheduler.from_config(config, logger=logger)
    easing = ProfileEasing(ProfileType.S_CURVED, accel_fraction=0.3)

    hours, minutes = world["hours"], world["minutes"]
    world.on("itemChange", lambda name, snapshot: logger.debug(f"{name}: {snapshot}"))
    world.start()
    try:
        while True:
            now = datetime.now()
            hours.turn_to_time((now.hour % 12, now.minute, now.second), duration=3, easing=easing)
            minutes.turn_to_time((now.minute / 5, 0, 0), duration=3, easing=easing)
            world.check_workers()
            time.sleep(60 - datetime.now().second)
    except KeyboardInterrupt:
        logger.info("Stopped by user.")
    finally:
        world.close()


if __name__ == '__main__':
    main()
