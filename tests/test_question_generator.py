"""Tests for ENEM question generation."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from enemgenius.llm import GenerationOptions, LLMError, LLMRateLimited, LLMSuccess
from enemgenius.service.question_generator import (
    SYSTEM_INSTRUCTION,
    GenerationRequest,
    QuestionGenerationError,
    RateLimitedError,
    build_explanation_prompt,
    build_generation_prompt,
    explain_question,
    generate_questions,
    get_temperature_label,
    parse_generated_questions,
    retrieve_generation_context,
    validate_question_fields,
)

OPTIONS = ["Alternativa A", "Alternativa B", "Alternativa C", "Alternativa D", "Alternativa E"]


def objective_item(**overrides):
    item = {"stem": "Enunciado da questão.", "type": "objective", "options": OPTIONS, "answerIndex": 2}
    item.update(overrides)
    return item


@pytest.fixture
def objective_request():
    return GenerationRequest(
        num_questions=2,
        discipline="História",
        topics="revolução industrial, urbanização",
    )


class TestGenerationRequest:
    """Tests for GenerationRequest."""

    def test_defaults_are_valid(self):
        GenerationRequest().validate()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("num_questions", 0),
            ("num_questions", 11),
            ("question_type", "oral"),
            ("discipline", "Astrologia"),
            ("school_year", "9º Ano"),
            ("difficulty", "Impossível"),
            ("bloom_level", "Decorar"),
            ("construction_type", "Charada"),
            ("temperature", 1.5),
        ],
    )
    def test_rejects_invalid_values(self, field, value):
        request = GenerationRequest(**{field: value})
        with pytest.raises(ValueError):
            request.validate()

    def test_topic_list_splits_and_trims(self):
        assert GenerationRequest(topics=" clima , relevo,, ").topic_list == ["clima", "relevo"]

    def test_retrieval_query_falls_back_to_discipline(self):
        assert GenerationRequest(topics="  ", discipline="Biologia").retrieval_query == "Biologia"
        assert GenerationRequest(topics="células").retrieval_query == "células"

    def test_from_dict_reads_camel_case_keys(self):
        request = GenerationRequest.from_dict(
            {
                "numQuestions": "4",
                "questionType": "subjective",
                "discipline": "Química",
                "bloomLevel": "Aplicar",
                "temperature": 0.3,
            }
        )
        assert request.num_questions == 4
        assert request.question_type == "subjective"
        assert request.discipline == "Química"
        assert request.bloom_level == "Aplicar"
        assert request.temperature == 0.3
        assert request.difficulty == "Médio"


class TestRetrieveGenerationContext:
    """Tests for retrieve_generation_context."""

    def test_no_selected_files_yields_empty_context(self, mock_store):
        assert retrieve_generation_context(mock_store, GenerationRequest(topics="clima"), 1000) == ""

    def test_flattens_selected_files_in_order(self, mock_store, create_knowledge_file):
        mock_store.get_selected_files.return_value = [
            create_knowledge_file(["Clima equatorial úmido."], file_id="f1"),
            create_knowledge_file(["Clima semiárido.", "Relevo de planaltos."], file_id="f2"),
        ]

        context = retrieve_generation_context(mock_store, GenerationRequest(topics="clima"), 1000)

        assert context == "Clima equatorial úmido.\n\nClima semiárido."

    def test_uses_discipline_when_topics_blank(self, mock_store, create_knowledge_file):
        mock_store.get_selected_files.return_value = [
            create_knowledge_file(["Texto sobre outra coisa.", "Conteúdo de Geografia física."])
        ]

        context = retrieve_generation_context(
            mock_store, GenerationRequest(topics="", discipline="Geografia"), 1000
        )

        assert context == "Conteúdo de Geografia física."

    def test_respects_budget(self, mock_store, create_knowledge_file):
        mock_store.get_selected_files.return_value = [
            create_knowledge_file(["clima " * 10, "clima " * 10])
        ]

        context = retrieve_generation_context(mock_store, GenerationRequest(topics="clima"), 70)

        assert context == "clima " * 10


class TestBuildGenerationPrompt:
    """Tests for build_generation_prompt."""

    def test_includes_parameters(self, objective_request):
        prompt = build_generation_prompt(objective_request)

        assert "**Quantidade:** 2" in prompt
        assert "História (Área de Conhecimento: Ciências Humanas e Sociais Aplicadas)" in prompt
        assert "revolução industrial, urbanização" in prompt
        assert "Alta (0.70)" in prompt
        assert '"answerIndex"' in prompt

    def test_includes_context_block(self, objective_request):
        prompt = build_generation_prompt(objective_request, "Trecho da apostila.")

        assert "--- INÍCIO DO CONTEXTO ---\nTrecho da apostila.\n--- FIM DO CONTEXTO ---" in prompt

    def test_without_context(self, objective_request):
        prompt = build_generation_prompt(objective_request, "")

        assert "Nenhum contexto adicional foi fornecido" in prompt
        assert "INÍCIO DO CONTEXTO" not in prompt

    def test_subjective_asks_for_expected_answer(self):
        prompt = build_generation_prompt(GenerationRequest(question_type="subjective"))

        assert '"expectedAnswer"' in prompt
        assert '"answerIndex"' not in prompt
        assert "Dissertativa" in prompt

    def test_blank_topics_use_general_wording(self):
        prompt = build_generation_prompt(GenerationRequest(topics=""))
        assert "Tópicos gerais da disciplina" in prompt

    @pytest.mark.parametrize(
        "temperature,label",
        [(0.1, "Baixíssima"), (0.3, "Baixa"), (0.5, "Média"), (0.7, "Alta"), (0.95, "Altíssima")],
    )
    def test_temperature_labels(self, temperature, label):
        assert get_temperature_label(temperature).startswith(label)


class TestParseGeneratedQuestions:
    """Tests for parse_generated_questions."""

    def test_parses_objective_questions(self, objective_request):
        text = json.dumps([objective_item(), objective_item(stem="Outra.", answerIndex=0)])

        questions = parse_generated_questions(text, objective_request)

        assert len(questions) == 2
        assert questions[0].stem == "Enunciado da questão."
        assert questions[0].options == OPTIONS
        assert questions[0].answer_index == 2
        assert questions[0].discipline == "História"
        assert questions[0].topics == ["revolução industrial", "urbanização"]
        assert questions[0].id != questions[1].id

    def test_tolerates_code_fences(self, objective_request):
        text = "```json\n" + json.dumps([objective_item()]) + "\n```"
        assert len(parse_generated_questions(text, objective_request)) == 1

    def test_accepts_wrapped_array(self, objective_request):
        text = json.dumps({"questions": [objective_item()]})
        assert len(parse_generated_questions(text, objective_request)) == 1

    def test_parses_subjective_questions(self):
        request = GenerationRequest(question_type="subjective")
        text = json.dumps([{"stem": "Explique.", "expectedAnswer": "Resposta."}])

        question = parse_generated_questions(text, request)[0]

        assert question.type == "subjective"
        assert question.expected_answer == "Resposta."
        assert question.options is None

    @pytest.mark.parametrize(
        "text",
        [
            "não é json",
            json.dumps({"stem": "objeto"}),
            json.dumps([]),
            json.dumps(["texto"]),
            json.dumps([objective_item(stem="  ")]),
            json.dumps([objective_item(options=OPTIONS[:4])]),
            json.dumps([objective_item(answerIndex=5)]),
            json.dumps([objective_item(answerIndex=True)]),
            json.dumps([objective_item(answerIndex="1")]),
        ],
    )
    def test_rejects_invalid_responses(self, text, objective_request):
        with pytest.raises(QuestionGenerationError):
            parse_generated_questions(text, objective_request)

    def test_subjective_requires_expected_answer(self):
        request = GenerationRequest(question_type="subjective")
        with pytest.raises(QuestionGenerationError, match="resposta esperada"):
            parse_generated_questions(json.dumps([{"stem": "Explique."}]), request)


class TestValidateQuestionFields:
    """Tests for validate_question_fields."""

    def test_accepts_stored_objective_question(self, create_question):
        validate_question_fields(create_question("q1").to_dict())

    def test_rejects_answer_index_outside_options(self, create_question):
        data = create_question("q1").to_dict()
        data["answerIndex"] = 5
        with pytest.raises(ValueError, match="answerIndex"):
            validate_question_fields(data)

    def test_rejects_boolean_answer_index(self, create_question):
        data = create_question("q1").to_dict()
        data["answerIndex"] = True
        with pytest.raises(ValueError, match="answerIndex"):
            validate_question_fields(data)

    def test_rejects_wrong_option_count(self, create_question):
        data = create_question("q1").to_dict()
        data["options"] = ["x"]
        with pytest.raises(ValueError, match="options"):
            validate_question_fields(data)

    def test_rejects_non_boolean_favorited(self, create_question):
        data = create_question("q1").to_dict()
        data["favorited"] = "sim"
        with pytest.raises(ValueError, match="favorited"):
            validate_question_fields(data)

    def test_subjective_needs_expected_answer(self, create_question):
        question = create_question(
            "q1", type="subjective", options=None, answer_index=None, expected_answer="Texto"
        )
        data = question.to_dict()
        validate_question_fields(data)

        data["expectedAnswer"] = "  "
        with pytest.raises(ValueError, match="expectedAnswer"):
            validate_question_fields(data)


class TestGenerateQuestions:
    """Tests for generate_questions."""

    @pytest.mark.asyncio
    async def test_calls_llm_in_json_mode(self, objective_request):
        llm = MagicMock()
        llm.generate = AsyncMock(return_value=LLMSuccess(text=json.dumps([objective_item()])))

        questions = await generate_questions(llm, objective_request, "Contexto.")

        assert len(questions) == 1
        prompt, options = llm.generate.call_args.args
        assert "Contexto." in prompt
        assert options == GenerationOptions(
            json_output=True, system_instruction=SYSTEM_INSTRUCTION, temperature=0.7
        )

    @pytest.mark.asyncio
    async def test_rate_limited_raises(self, objective_request):
        llm = MagicMock()
        llm.generate = AsyncMock(return_value=LLMRateLimited(message="limite"))

        with pytest.raises(RateLimitedError, match="limite"):
            await generate_questions(llm, objective_request)

    @pytest.mark.asyncio
    async def test_provider_error_raises(self, objective_request):
        llm = MagicMock()
        llm.generate = AsyncMock(return_value=LLMError(message="falhou"))

        with pytest.raises(QuestionGenerationError, match="falhou") as exc_info:
            await generate_questions(llm, objective_request)
        assert not isinstance(exc_info.value, RateLimitedError)


class TestExplainQuestion:
    """Tests for explanations."""

    def test_explanation_prompt_lists_options_and_answer(self, create_question):
        prompt = build_explanation_prompt(create_question())

        assert "Enunciado: Qual é a capital do Brasil?" in prompt
        assert "B) Brasília" in prompt
        assert "Gabarito: B" in prompt

    def test_explanation_prompt_for_subjective(self, create_question):
        question = create_question(
            type="subjective", options=None, answer_index=None, expected_answer="Brasília."
        )
        prompt = build_explanation_prompt(question)

        assert "Resposta esperada: Brasília." in prompt
        assert "Gabarito" not in prompt

    @pytest.mark.asyncio
    async def test_explain_question_returns_text(self, create_question):
        llm = MagicMock()
        llm.generate = AsyncMock(return_value=LLMSuccess(text="  Porque é a capital.  "))

        assert await explain_question(llm, create_question()) == "Porque é a capital."

    @pytest.mark.asyncio
    async def test_explain_question_rate_limited(self, create_question):
        llm = MagicMock()
        llm.generate = AsyncMock(return_value=LLMRateLimited(message="limite"))

        with pytest.raises(RateLimitedError):
            await explain_question(llm, create_question())
