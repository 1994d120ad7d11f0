"""Reply keyboards and texts for each scan step."""

from __future__ import annotations

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup, ReplyKeyboardRemove

from dressmewell.body_shape import BodyShape, ScanSession, ScanStep

NEXT = "Next"
BACK = "Back"
CANCEL = "Cancel"
SKIP = "Choose manually"
CONFIRM = "Confirm"

SHAPE_BUTTONS: dict[str, BodyShape] = {shape.display_name: shape for shape in BodyShape}

STEP_TEXTS: dict[ScanStep, str] = {
    ScanStep.INTRO: (
        "Let's find your body shape. I'll look at a full-length photo and suggest "
        "one of five shapes, and you can always correct me."
    ),
    ScanStep.INSTRUCTIONS: (
        "For the best result: stand straight facing the camera, wear fitted clothes, "
        "keep your whole body in the frame and use a plain background."
    ),
    ScanStep.CAPTURING: "Send me the photo now.",
    ScanStep.PROCESSING: "Analysing your photo...",
}


def _rows(*rows: list[str]) -> list[list[KeyboardButton]]:
    return [[KeyboardButton(text=text) for text in row] for row in rows]


def step_keyboard(step: ScanStep) -> ReplyKeyboardMarkup | ReplyKeyboardRemove:
    """Return the keyboard matching a scan step."""

    if step == ScanStep.INTRO:
        keyboard = _rows([NEXT], [SKIP, CANCEL])
    elif step == ScanStep.INSTRUCTIONS:
        keyboard = _rows([NEXT], [BACK, CANCEL])
    elif step == ScanStep.CAPTURING:
        keyboard = _rows([BACK, CANCEL])
    elif step == ScanStep.RESULT:
        names = list(SHAPE_BUTTONS)
        shape_rows = [names[index : index + 2] for index in range(0, len(names), 2)]
        keyboard = _rows(*shape_rows, [CONFIRM], [BACK, CANCEL])
    else:
        return ReplyKeyboardRemove()
    return ReplyKeyboardMarkup(keyboard=keyboard, resize_keyboard=True)


def result_text(session: ScanSession) -> str:
    """Describe the current candidate and how to change it."""

    lines = []
    if session.detected is not None:
        lines.append(f"Your body shape appears to be: {session.detected.display_name}.")
    if session.candidate is None:
        lines.append("Pick the shape that fits you best.")
    else:
        if session.candidate != session.detected:
            lines.append(f"Selected: {session.candidate.display_name}.")
        lines.append(session.candidate.description)
        lines.append(f"Tap {CONFIRM} to save it, or pick another shape.")
    return "\n".join(lines)
