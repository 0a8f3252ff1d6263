"""
Example: Three-Bit Binary Counter
From the trainer's instruction book, volume 2

Button 6 advances the count on release. Lights 4, 5 and 6 show the count
in binary, light 4 being the most significant bit. Relays 1-6 form three
cascaded flip-flops.

Run with MINIVAC_DEBUG=1 to see every relay transition.
"""
import logging
import os

from minivac import MinivacSimulator

CIRCUIT = """
1A/2E 2C/2- 3H/5A 5F/6F 1B/1C 2E/2J 3J/4H 5F/5H
1B/2B 2G/2N 3N/4N 5G/5+ 1C/2C 2H/3L 4B/5B 5H/6A
1E/2G 2L/2- 4C/4- 5J/6H 1F/2F 3A/6E 4E/4J 5N/6N
1F/1H 3B/4B 4G/4N 6C/6- 1G/1+ 3C/4C 4H/5L 6E/6J
1H/4A 3E/4G 4L/4- 6G/6N 1J/2H 3F/3H 5B/6B 6H/6X
2A/4E 3F/4F 5C/6C 6L/6- 2B/3B 3G/3+ 5E/6G 6Y/6+
"""


def lamp_row(lights):
    return " ".join("*" if lit else "." for lit in lights)


def relay_row(relays):
    return "".join("1" if r else "0" for r in relays)


def count(state):
    lights = state.lights
    return (lights[3] << 2) | (lights[4] << 1) | int(lights[5])


def main():
    if os.environ.get("MINIVAC_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    sim = MinivacSimulator(CIRCUIT)
    sim.initialize()

    print("=" * 50)
    print("THREE-BIT COUNTER")
    print("=" * 50)
    print(f"{'press':>5}  {'lights 1-6':<12} {'relays':<8} {'count':>5}  {'mA':>7}")

    state = sim.get_state()
    print(f"{0:>5}  {lamp_row(state.lights):<12} {relay_row(state.relays):<8} "
          f"{count(state):>5}  {state.supply_current * 1000:7.1f}")

    for press in range(1, 10):
        sim.press_button(6)
        sim.release_button(6)
        state = sim.get_state()
        print(f"{press:>5}  {lamp_row(state.lights):<12} {relay_row(state.relays):<8} "
              f"{count(state):>5}  {state.supply_current * 1000:7.1f}")

        if state.alerts:
            print(f"       alerts: {', '.join(state.alerts)}")

    print("=" * 50)


if __name__ == "__main__":
    main()
