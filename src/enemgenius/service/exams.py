"""Exam assembly from stored questions."""

from enemgenius.models import Exam, ExamOptions, Question


def create_exam(
    name: str,
    question_ids: list[str],
    include_options: bool = True,
    include_answer_key: bool = False,
) -> Exam:
    """Create an exam from an ordered list of question IDs.

    Duplicate IDs are dropped, keeping their first position.

    Raises:
        ValueError: If the name is blank or no question is given
    """
    if not name or not name.strip():
        raise ValueError("Exam name is required")

    unique_ids = list(dict.fromkeys(question_ids))
    if not unique_ids:
        raise ValueError("An exam needs at least one question")

    return Exam(
        name=name.strip(),
        question_ids=unique_ids,
        generation_options=ExamOptions(
            include_options=include_options, include_answer_key=include_answer_key
        ),
    )


def resolve_exam_questions(exam: Exam, questions: list[Question]) -> list[Question]:
    """Return the exam's questions in exam order, skipping questions that no longer exist."""
    by_id = {question.id: question for question in questions}
    return [by_id[qid] for qid in exam.question_ids if qid in by_id]
