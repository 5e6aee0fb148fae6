from enum import IntEnum

class Grade(IntEnum):
    AGAIN = 0
    HARD = 1
    GOOD = 2
    EASY = 3

GRADE_LABELS = {
    Grade.AGAIN: "Again",
    Grade.HARD: "Hard",
    Grade.GOOD: "Good",
    Grade.EASY: "Easy",
}

# SM-2 response quality (0-5) for each passing grade
GRADE_QUALITY = {
    Grade.HARD: 3,
    Grade.GOOD: 5,
    Grade.EASY: 5,
}


def grade_from_correct(correct: bool) -> Grade:
    """Map a binary correct/incorrect answer onto the grade scale."""
    return Grade.GOOD if correct else Grade.AGAIN
