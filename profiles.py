# profiles.py
#
# Rough label for what an operator spent the session doing.

INTRUSION_COMMANDS = ("exploit", "crack")
SURVEILLANCE_COMMANDS = ("scan", "camera", "wifi")
RECON_COMMANDS = ("whoami", "ls", "cat", "cd", "pwd", "history")


def classify(commands, trace_level=0):
    names = [c.split()[0].lower() for c in commands if c.split()]

    if trace_level >= 100:
        return "compromised"
    if len(names) > 30:
        return "automation"
    if any(name in INTRUSION_COMMANDS for name in names):
        return "intrusion"
    if any(name in SURVEILLANCE_COMMANDS for name in names):
        return "surveillance"
    if any(name in RECON_COMMANDS for name in names):
        return "reconnaissance"
    return "idle"
