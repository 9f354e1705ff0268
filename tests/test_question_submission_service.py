import pytest

from coursework.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from coursework.models import QuestionType


@pytest.fixture
def student(directory):
    return directory.add_user("student")


@pytest.fixture
def closed_question(directory):
    return directory.add_question(
        "What is 2 + 2?",
        options=[("4", True), ("5", False), ("22", False)]
    )


@pytest.fixture
def open_question(directory):
    return directory.add_question("Explain why", type=QuestionType.OPEN_ENDED)


def _option(question, text):
    return next(o for o in question.options if o.text == text)


class TestClosedEnded:
    async def test_correct_option_scores_full_marks(self, question_service, closed_question, student):
        result = await question_service.submit_answer(
            closed_question.public_id, student.public_id, option_id=_option(closed_question, "4").public_id
        )

        assert result.score == 100
        assert result.passed is True
        assert result.activity_submission_id is None

    @pytest.mark.parametrize("text", ["5", "22"])
    async def test_wrong_option_scores_zero(self, question_service, closed_question, student, text):
        result = await question_service.submit_answer(
            closed_question.public_id, student.public_id, option_id=_option(closed_question, text).public_id
        )

        assert result.score == 0
        assert result.passed is False

    async def test_unknown_option_creates_nothing(
        self, question_service, question_submission_store, closed_question, student
    ):
        with pytest.raises(InvalidInputError):
            await question_service.submit_answer(closed_question.public_id, student.public_id, option_id="missing")

        assert question_submission_store.rows == []

    async def test_option_from_other_question_is_rejected(
        self, question_service, question_submission_store, directory, closed_question, student
    ):
        other = directory.add_question("Other", options=[("yes", True)])

        with pytest.raises(InvalidInputError):
            await question_service.submit_answer(
                closed_question.public_id, student.public_id, option_id=other.options[0].public_id
            )

        assert question_submission_store.rows == []

    async def test_missing_option_is_rejected(self, question_service, closed_question, student):
        with pytest.raises(InvalidInputError):
            await question_service.submit_answer(closed_question.public_id, student.public_id)


class TestOpenEnded:
    @pytest.mark.parametrize("answer", [None, ""])
    async def test_empty_answer_is_rejected(self, question_service, question_submission_store, open_question, student, answer):
        with pytest.raises(InvalidInputError):
            await question_service.submit_answer(open_question.public_id, student.public_id, answer_text=answer)

        assert question_submission_store.rows == []

    async def test_answer_is_never_auto_graded(self, question_service, open_question, student):
        result = await question_service.submit_answer(
            open_question.public_id, student.public_id, answer_text="because multiplication distributes"
        )

        assert result.score is None
        assert result.passed is False
        assert result.answer_text == "because multiplication distributes"

    async def test_answer_is_stored_verbatim(self, question_service, open_question, student):
        result = await question_service.submit_answer(
            open_question.public_id, student.public_id, answer_text="    return x\n"
        )

        assert result.answer_text == "    return x\n"
        assert result.score is None

    async def test_whitespace_answer_is_accepted(self, question_service, open_question, student):
        result = await question_service.submit_answer(open_question.public_id, student.public_id, answer_text="  ")

        assert result.answer_text == "  "
        assert result.passed is False


class TestLookups:
    async def test_unknown_question(self, question_service, student):
        with pytest.raises(NotFoundError) as exc:
            await question_service.submit_answer("missing", student.public_id, answer_text="x")
        assert exc.value.code == "QUESTION_NOT_FOUND"

    async def test_unknown_user(self, question_service, open_question):
        with pytest.raises(NotFoundError) as exc:
            await question_service.submit_answer(open_question.public_id, "missing", answer_text="x")
        assert exc.value.code == "USER_NOT_FOUND"

    async def test_get_by_public_id(self, question_service, open_question, student):
        created = await question_service.submit_answer(open_question.public_id, student.public_id, answer_text="x")

        found = await question_service.get_by_public_id(created.public_id)

        assert found is created

    async def test_get_unknown_submission(self, question_service):
        with pytest.raises(NotFoundError) as exc:
            await question_service.get_by_public_id("missing")
        assert exc.value.code == "QUESTION_SUBMISSION_NOT_FOUND"


class TestActivityAttribution:
    @pytest.fixture
    def activity(self, directory, student, closed_question):
        group = directory.add_group()
        activity = directory.add_activity(group)
        directory.add_member(group, student)
        directory.add_item(activity, closed_question)
        return activity

    async def test_attempt_creates_activity_submission(
        self, question_service, submission_store, activity, closed_question, student
    ):
        result = await question_service.submit_answer(
            closed_question.public_id,
            student.public_id,
            option_id=_option(closed_question, "4").public_id,
            activity_id=activity.public_id
        )

        [submission] = submission_store.rows
        assert result.activity_submission_id == submission.id
        assert submission.activity_id == activity.id

    async def test_repeated_attempts_share_one_submission(
        self, question_service, submission_store, activity, closed_question, student
    ):
        for text in ("5", "4"):
            await question_service.submit_answer(
                closed_question.public_id,
                student.public_id,
                option_id=_option(closed_question, text).public_id,
                activity_id=activity.public_id
            )

        assert len(submission_store.rows) == 1

    async def test_question_outside_activity(self, question_service, activity, open_question, student):
        with pytest.raises(NotFoundError) as exc:
            await question_service.submit_answer(
                open_question.public_id, student.public_id, answer_text="x", activity_id=activity.public_id
            )
        assert exc.value.code == "ACTIVITY_ITEM_NOT_FOUND"

    async def test_non_member_cannot_attribute(self, question_service, directory, activity, closed_question):
        outsider = directory.add_user("outsider")

        with pytest.raises(ForbiddenError):
            await question_service.submit_answer(
                closed_question.public_id,
                outsider.public_id,
                option_id=_option(closed_question, "4").public_id,
                activity_id=activity.public_id
            )


class TestListing:
    async def test_list_mine_filters_by_statement(self, question_service, directory, closed_question, open_question, student):
        await question_service.submit_answer(
            closed_question.public_id, student.public_id, option_id=_option(closed_question, "4").public_id
        )
        await question_service.submit_answer(open_question.public_id, student.public_id, answer_text="x")

        page = await question_service.list_mine(student.public_id, 1, 20, statement="  2 + 2 ")

        assert page.total_items == 1
        assert page.items[0].question_id == closed_question.id

    async def test_list_mine_newest_first(self, question_service, open_question, student):
        first = await question_service.submit_answer(open_question.public_id, student.public_id, answer_text="a")
        second = await question_service.submit_answer(open_question.public_id, student.public_id, answer_text="b")

        page = await question_service.list_mine(student.public_id, 1, 20)

        assert [s.public_id for s in page.items] == [second.public_id, first.public_id]

    async def test_list_by_question(self, question_service, directory, open_question, student):
        other = directory.add_user("other")
        for user in (student, other):
            await question_service.submit_answer(open_question.public_id, user.public_id, answer_text="x")

        page = await question_service.list_by_question(open_question.public_id, 1, 1)

        assert page.total_items == 2
        assert page.total_pages == 2
        assert len(page.items) == 1
