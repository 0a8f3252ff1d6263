"""
Example: Automatic Morse Code Transmitter
From the trainer's instruction book, volume 3

The selector motor sweeps contacts D0-D15 and the relays key lights 5
(dash) and 6 (dot) to send "JOHN" over and over while button 6 is held.

The simulator is driven by a stepped clock instead of wall time, so the
timeline below covers several seconds of panel time in a fraction of a
second. The plot is saved to morse_timeline.png.
"""
import matplotlib.pyplot as plt

from minivac import MinivacSimulator

CIRCUIT = [
    '3C/4C', '4F/5N', '5L/D0', '6H/6+', '3F/4G', '4H/5H', '5X/6E', '6H/6Y',
    '3G/3K', '4K/5F', '5Y/6Y', '6com/D2', '3G/5com', '4L/D15', '5com/D11', 'D3/D4',
    '3H/D12', '4N/5E', '6A/6com', 'D4/D5', '3J/6com', '5A/5com', '6B/6-', 'D5/D12',
    '3L/D13', '5B/6B', '6C/6-', 'D16/D17', '4C/5C', '5C/6C', '6F/6G', 'D18/M-',
    '4E/5K', '5F/5G', '6F/6X', '4F/4G', '5H/5+', '6G/D17',
]

STEP_MS = 5.0
DURATION_MS = 9000.0


class SteppedClock:
    """Clock that only moves when told to, in seconds."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def step(self, ms):
        self.now += ms / 1000.0


def record_transmission():
    """Hold button 6 and sample the panel every STEP_MS."""
    clock = SteppedClock()
    sim = MinivacSimulator(CIRCUIT, clock=clock)
    sim.initialize()
    sim.press_button(6)

    times, dash, dot, position = [], [], [], []
    t = 0.0
    while t <= DURATION_MS:
        state = sim.get_state()
        times.append(t / 1000.0)
        dash.append(int(state.lights[4]))
        dot.append(int(state.lights[5]))
        position.append(state.motor.position)
        clock.step(STEP_MS)
        t += STEP_MS

    sim.release_button(6)
    return times, dash, dot, position


def decode(dash, dot):
    """Collapse the light samples into a symbol string, one entry per pulse."""
    symbols = []
    previous = " "
    for d, o in zip(dash, dot):
        current = "-" if d and not o else "." if o and not d else " "
        if current != previous and current != " ":
            symbols.append(current)
        elif current == " " and previous != " ":
            symbols.append(" ")
        previous = current
    return "".join(symbols).strip()


def main():
    times, dash, dot, position = record_transmission()

    print("=" * 60)
    print("MORSE TRANSMITTER")
    print("=" * 60)
    print(f"Samples:    {len(times)} ({STEP_MS:.0f} ms apart)")
    print(f"Received:   {decode(dash, dot)}")

    fig, axes = plt.subplots(3, 1, figsize=(12, 6), sharex=True)

    axes[0].step(times, dash, where='post', color='tab:red')
    axes[0].set_ylabel('Light 5\n(dash)')
    axes[0].set_ylim(-0.2, 1.2)

    axes[1].step(times, dot, where='post', color='tab:blue')
    axes[1].set_ylabel('Light 6\n(dot)')
    axes[1].set_ylim(-0.2, 1.2)

    axes[2].step(times, position, where='post', color='k')
    axes[2].set_ylabel('Selector\ncontact')
    axes[2].set_xlabel('Time (s)')
    axes[2].set_yticks(range(0, 16, 3))

    for ax in axes:
        ax.grid(True, alpha=0.3)

    fig.suptitle('Morse transmitter: "JOHN" on lights 5 and 6')
    plt.tight_layout()
    plt.savefig('morse_timeline.png', dpi=150)
    print("Saved: morse_timeline.png")
    plt.close()


if __name__ == "__main__":
    main()
