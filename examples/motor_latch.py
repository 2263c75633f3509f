"""Motor starter with self-holding contact and overload latch.

E1 is the start button, E2 the (normally closed) stop button and E3
the overload relay.  A1 drives the motor contactor; M1 latches an
overload fault until E4 acknowledges it, and A2 lights the fault lamp.
"""

from ilplc import simulate

MOTOR = """
// Network 1: motor contactor with self-holding contact
U ( E1
O A1 )
U E2
UN M1
= A1
"""

FAULT = """
// Network 2: overload latch, acknowledged by E4
U E3
S M1
U E4
UN E3
R M1
U M1
= A2
"""


# -------------------------------------------------------------------------
# Stepped run
# -------------------------------------------------------------------------

def main():
    plc = simulate([MOTOR, FAULT], inputs=4, outputs=2, flags=1)

    def step(label, inputs):
        plc.set_inputs(inputs)
        plc.tick(ms=30)
        motor, lamp = plc.get_outputs()
        print(f"{label:<20} motor={motor!s:<5} fault={lamp}")

    step("idle", [0, 1, 0, 0])
    step("press start", [1, 1, 0, 0])
    step("release start", [0, 1, 0, 0])
    step("overload trips", [0, 1, 1, 0])
    step("overload clears", [0, 1, 0, 0])
    step("acknowledge", [0, 1, 0, 1])
    step("restart", [1, 1, 0, 0])
    step("press stop", [0, 0, 0, 0])
    print(f"scans: {plc.runtime_counter}")


if __name__ == "__main__":
    main()
