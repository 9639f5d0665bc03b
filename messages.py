"""Encouraging text shown alongside questions, feedback and awards."""

import random

from facts import Fact

PRAISE = [
    "Correct! 🎉",
    "Awesome! 🌟",
    "You nailed it! 💥",
    "Yes! Great work! ✅",
    "Boom! Math star! ⭐️",
]

ENCOURAGEMENT = [
    "Nice try! 💪",
    "Keep going! You've got this! 🚀",
    "So close! Try the next one! ✨",
    "Don't give up! 🌈",
    "Every try makes you stronger! 🧠",
]

TIPS = [
    "Try skip counting! 4, 8, 12, 16... ✨",
    "Zero times anything is zero! 0️⃣",
    "Tens are easy: add a zero at the end! 🔟",
    "Fives end with 0 or 5! 🙌",
    "Practice makes progress! 🌟",
    "Nine trick: digits add to 9! 🪄",
]


def feedback_message(fact: Fact, is_correct: bool, rng: random.Random) -> str:
    if is_correct:
        return f"{rng.choice(PRAISE)} {fact} = {fact.answer}. High five! ✋"
    return (
        f"{rng.choice(ENCOURAGEMENT)} The answer is {fact} = {fact.answer}. "
        "You can do it next time!"
    )


def random_tip(rng: random.Random) -> str:
    return rng.choice(TIPS)


def achievement_message(level: int) -> str:
    times = "once" if level == 1 else f"{level} times"
    return f"Level {level} unlocked! You answered every fact correctly {times}! 🏆"
