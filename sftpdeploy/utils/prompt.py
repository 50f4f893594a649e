"""
Interactive y/n prompt
"""
YES_ANSWERS = ("y", "yes", "s", "si")


def confirm(question: str) -> bool:
    """Ask *question*; anything but a yes answer (or EOF / Ctrl-C) is a no."""
    try:
        answer = input(question)
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return answer.strip().lower() in YES_ANSWERS
