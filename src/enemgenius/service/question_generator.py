"""ENEM question generation: context retrieval, prompting and response parsing."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from enemgenius.constants import (
    ALL_DISCIPLINES,
    BLOOM_LEVELS,
    CONSTRUCTION_TYPES,
    DEFAULT_TEMPERATURE,
    DIFFICULTY_LEVELS,
    DISCIPLINE_TO_AREA_MAP,
    SCHOOL_YEARS,
)
from enemgenius.llm.base import GenerationOptions, LLMRateLimited, LLMService, LLMSuccess
from enemgenius.models import Question
from enemgenius.rag import select_context

logger = logging.getLogger(__name__)

OBJECTIVE_OPTION_COUNT = 5
MAX_QUESTIONS_PER_REQUEST = 10

SYSTEM_INSTRUCTION = (
    "Você é um especialista em elaboração de questões para o ENEM, focado em criar itens de "
    "alta qualidade, contextualizados e alinhados com a Matriz de Referência. Siga estritamente "
    "as especificações e o formato JSON de saída."
)

EXPLANATION_INSTRUCTION = (
    "Você é um professor experiente de preparação para o ENEM. Explique questões de forma "
    "clara, didática e objetiva, em português do Brasil."
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class QuestionGenerationError(Exception):
    """Raised when questions cannot be generated or the response is invalid."""


class RateLimitedError(QuestionGenerationError):
    """Raised when the LLM provider rejects the request because of rate limiting."""


@dataclass
class GenerationRequest:
    """Parameters of a question generation request."""

    num_questions: int = 3
    question_type: str = "objective"
    discipline: str = "Língua Portuguesa"
    school_year: str = "3ª Série do Ensino Médio"
    difficulty: str = "Médio"
    bloom_level: str = "Analisar"
    construction_type: str = "Interpretação"
    topics: str = ""
    temperature: float = DEFAULT_TEMPERATURE

    def validate(self) -> None:
        """Check every parameter against the allowed values.

        Raises:
            ValueError: If a parameter is out of range or unknown
        """
        if not 1 <= self.num_questions <= MAX_QUESTIONS_PER_REQUEST:
            raise ValueError(f"num_questions must be between 1 and {MAX_QUESTIONS_PER_REQUEST}")
        if self.question_type not in ("objective", "subjective"):
            raise ValueError(f"Unknown question type: {self.question_type}")
        if self.discipline not in ALL_DISCIPLINES:
            raise ValueError(f"Unknown discipline: {self.discipline}")
        if self.school_year not in SCHOOL_YEARS:
            raise ValueError(f"Unknown school year: {self.school_year}")
        if self.difficulty not in DIFFICULTY_LEVELS:
            raise ValueError(f"Unknown difficulty: {self.difficulty}")
        if self.bloom_level not in BLOOM_LEVELS:
            raise ValueError(f"Unknown Bloom level: {self.bloom_level}")
        if self.construction_type not in CONSTRUCTION_TYPES:
            raise ValueError(f"Unknown construction type: {self.construction_type}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError("temperature must be between 0 and 1")

    @property
    def topic_list(self) -> list[str]:
        return [topic.strip() for topic in self.topics.split(",") if topic.strip()]

    @property
    def retrieval_query(self) -> str:
        """Text used to rank document chunks: the topics, or the discipline when none are given."""
        return self.topics.strip() or self.discipline

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenerationRequest":
        defaults = cls()
        return cls(
            num_questions=int(data.get("numQuestions", defaults.num_questions)),
            question_type=data.get("questionType", defaults.question_type),
            discipline=data.get("discipline", defaults.discipline),
            school_year=data.get("schoolYear", defaults.school_year),
            difficulty=data.get("difficulty", defaults.difficulty),
            bloom_level=data.get("bloomLevel", defaults.bloom_level),
            construction_type=data.get("constructionType", defaults.construction_type),
            topics=data.get("topics", defaults.topics) or "",
            temperature=float(data.get("temperature", defaults.temperature)),
        )


def retrieve_generation_context(store, request: GenerationRequest, max_context_length: int) -> str:
    """Select document context for a request from the selected knowledge files.

    Args:
        store: Initialized KnowledgeStore
        request: The generation request
        max_context_length: Character budget for the context

    Returns:
        str: Context text, or "" when no knowledge file is selected
    """
    selected_files = store.get_selected_files()
    if not selected_files:
        return ""

    chunks = [chunk for file in selected_files for chunk in file.indexed_chunks]
    context = select_context(request.retrieval_query, chunks, max_context_length)
    logger.info(
        f"📚 Retrieved {len(context)} characters of context from "
        f"{len(selected_files)} file(s), {len(chunks)} chunk(s)"
    )
    return context


def get_temperature_label(temperature: float) -> str:
    """Describe a temperature value the way the generation form does."""
    if temperature <= 0.2:
        label = "Baixíssima"
    elif temperature <= 0.4:
        label = "Baixa"
    elif temperature <= 0.6:
        label = "Média"
    elif temperature <= 0.8:
        label = "Alta"
    else:
        label = "Altíssima"
    return f"{label} ({temperature:.2f})"


def build_generation_prompt(request: GenerationRequest, context: str = "") -> str:
    """Build the question generation prompt.

    Args:
        request: The generation request
        context: Document context selected for the request (may be empty)

    Returns:
        str: The prompt text
    """
    objective = request.question_type == "objective"
    type_label = (
        "Objetiva de múltipla escolha (A, B, C, D, E)" if objective else "Dissertativa"
    )
    if objective:
        answer_fields = (
            '"options": ["Alternativa A", "Alternativa B", "Alternativa C", "Alternativa D", '
            '"Alternativa E"],\n'
            '    "answerIndex": <índice da resposta correta, de 0 a 4>'
        )
    else:
        answer_fields = (
            '"expectedAnswer": "A resposta detalhada esperada para a questão dissertativa."'
        )

    if context:
        context_section = f"--- INÍCIO DO CONTEXTO ---\n{context}\n--- FIM DO CONTEXTO ---"
    else:
        context_section = (
            "Nenhum contexto adicional foi fornecido. "
            "Baseie-se no conhecimento geral da disciplina."
        )

    topics = request.topics.strip() or "Tópicos gerais da disciplina para a série especificada."
    area = DISCIPLINE_TO_AREA_MAP.get(request.discipline, "")

    return f"""# Pedido de Geração de Questões para o ENEM

**1. Perfil do Gerador:**
- Você é um especialista em elaboração de questões para o ENEM. Sua tarefa é criar questões que sejam claras, precisas, contextualizadas e que avaliem habilidades cognitivas complexas, conforme a Taxonomia de Bloom.
- As questões devem ser originais e evitar plágio.
- Para questões objetivas, as alternativas devem ser plausíveis, e apenas uma pode ser a correta. O gabarito deve ser indicado pelo índice da alternativa correta (0 para A, 1 para B, etc.).
- Para questões dissertativas, a resposta esperada deve ser um guia claro e objetivo do que o aluno precisa abordar.

**2. Parâmetros da Geração:**
- **Quantidade:** {request.num_questions}
- **Tipo de Questão:** {type_label}
- **Disciplina:** {request.discipline} (Área de Conhecimento: {area})
- **Série/Ano:** {request.school_year}
- **Nível de Dificuldade:** {request.difficulty}
- **Nível de Criatividade (Temperatura):** {get_temperature_label(request.temperature)}
- **Nível da Taxonomia de Bloom:** {request.bloom_level}
- **Tipo de Construção da Questão:** {request.construction_type}
- **Tópicos/Conteúdos:** {topics}

**3. Contexto Adicional (se fornecido):**
{context_section}

**4. Formato de Saída OBRIGATÓRIO (JSON Array):**
- Responda com um array de objetos JSON, onde cada objeto representa uma questão.
- A estrutura do JSON deve ser exatamente a seguinte:
```json
[
  {{
    "stem": "O enunciado completo da questão, incluindo qualquer texto de apoio, imagem (descrita como [Descrição da Imagem]), gráfico, etc.",
    "type": "{request.question_type}",
    {answer_fields}
  }}
]
```
- **NÃO inclua NENHUM texto, explicação ou introdução antes ou depois do array JSON.** Sua resposta deve começar com `[` e terminar com `]`.
"""


def _decode_json_array(text: str) -> list[Any]:
    cleaned = text.strip()
    fenced = _CODE_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise QuestionGenerationError(f"A resposta da IA não é um JSON válido: {e}") from e

    # Some models wrap the array in an object
    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        data = data["questions"]
    if not isinstance(data, list):
        raise QuestionGenerationError("A resposta da IA não é um array JSON de questões.")
    return data


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _valid_options(options: Any) -> bool:
    return (
        isinstance(options, list)
        and len(options) == OBJECTIVE_OPTION_COUNT
        and all(_is_non_empty_str(option) for option in options)
    )


def _valid_answer_index(answer_index: Any, options: list[str]) -> bool:
    return (
        isinstance(answer_index, int)
        and not isinstance(answer_index, bool)
        and 0 <= answer_index < len(options)
    )


def validate_question_fields(data: dict[str, Any]) -> None:
    """Check a serialized question before it is stored.

    Objective questions need exactly five non-empty options and an integer
    answer index pointing at one of them; subjective questions need an
    expected answer.

    Raises:
        ValueError: Naming the first invalid field
    """
    if not _is_non_empty_str(data.get("stem")):
        raise ValueError("stem must be a non-empty string")
    if not isinstance(data.get("favorited", False), bool):
        raise ValueError("favorited must be a boolean")
    topics = data.get("topics", [])
    if not isinstance(topics, list) or not all(isinstance(topic, str) for topic in topics):
        raise ValueError("topics must be a list of strings")

    if data.get("type", "objective") == "objective":
        options = data.get("options")
        if not _valid_options(options):
            raise ValueError(f"options must be {OBJECTIVE_OPTION_COUNT} non-empty strings")
        if not _valid_answer_index(data.get("answerIndex"), options):
            raise ValueError(f"answerIndex must be an integer from 0 to {len(options) - 1}")
    elif not _is_non_empty_str(data.get("expectedAnswer")):
        raise ValueError("expectedAnswer must be a non-empty string")


def _question_from_item(item: Any, index: int, request: GenerationRequest) -> Question:
    if not isinstance(item, dict):
        raise QuestionGenerationError(f"Questão {index + 1}: formato inválido.")

    stem = item.get("stem")
    if not _is_non_empty_str(stem):
        raise QuestionGenerationError(f"Questão {index + 1}: enunciado ausente.")

    question = Question(
        stem=stem.strip(),
        type=request.question_type,
        discipline=request.discipline,
        bloom_level=request.bloom_level,
        construction_type=request.construction_type,
        difficulty=request.difficulty,
        school_year=request.school_year,
        topics=request.topic_list,
    )

    if request.question_type == "objective":
        options = item.get("options")
        answer_index = item.get("answerIndex")
        if not _valid_options(options):
            raise QuestionGenerationError(
                f"Questão {index + 1}: são necessárias {OBJECTIVE_OPTION_COUNT} alternativas."
            )
        if not _valid_answer_index(answer_index, options):
            raise QuestionGenerationError(f"Questão {index + 1}: gabarito inválido.")
        question.options = [option.strip() for option in options]
        question.answer_index = answer_index
    else:
        expected_answer = item.get("expectedAnswer")
        if not _is_non_empty_str(expected_answer):
            raise QuestionGenerationError(f"Questão {index + 1}: resposta esperada ausente.")
        question.expected_answer = expected_answer.strip()

    return question


def parse_generated_questions(text: str, request: GenerationRequest) -> list[Question]:
    """Decode the LLM response into validated questions.

    Args:
        text: Raw response text (a JSON array, optionally inside a code fence)
        request: The request the response answers

    Returns:
        list[Question]: New questions carrying the request's classification

    Raises:
        QuestionGenerationError: If the response is not a valid question array
    """
    items = _decode_json_array(text)
    if not items:
        raise QuestionGenerationError("A IA não retornou nenhuma questão.")
    return [_question_from_item(item, i, request) for i, item in enumerate(items)]


def _unwrap(result) -> str:
    if isinstance(result, LLMSuccess):
        return result.text
    if isinstance(result, LLMRateLimited):
        raise RateLimitedError(result.message)
    raise QuestionGenerationError(result.message)


async def generate_questions(
    llm_service: LLMService, request: GenerationRequest, context: str = ""
) -> list[Question]:
    """Generate ENEM questions for a request.

    Args:
        llm_service: The LLM provider
        request: Validated generation request
        context: Document context to ground the questions on (may be empty)

    Returns:
        list[Question]: The generated questions

    Raises:
        RateLimitedError: If the provider is rate limiting requests
        QuestionGenerationError: If the provider fails or the response is invalid
    """
    prompt = build_generation_prompt(request, context)
    options = GenerationOptions(
        json_output=True,
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=request.temperature,
    )
    logger.info(
        f"📝 Generating {request.num_questions} {request.question_type} question(s) "
        f"for {request.discipline}"
    )
    text = _unwrap(await llm_service.generate(prompt, options))
    questions = parse_generated_questions(text, request)
    logger.info(f"✅ Generated {len(questions)} question(s)")
    return questions


def build_explanation_prompt(question: Question) -> str:
    """Build the prompt asking for a step-by-step explanation of a question."""
    lines = [
        "Explique a resolução da questão abaixo para um estudante do Ensino Médio.",
        "",
        f"Disciplina: {question.discipline}",
        f"Enunciado: {question.stem}",
    ]
    if question.type == "objective" and question.options:
        lines.append("Alternativas:")
        for i, option in enumerate(question.options):
            lines.append(f"{chr(ord('A') + i)}) {option}")
        if question.answer_index is not None:
            lines.append(f"Gabarito: {chr(ord('A') + question.answer_index)}")
        lines.append("")
        lines.append(
            "Justifique por que a alternativa correta está certa e por que cada uma das "
            "demais está errada."
        )
    else:
        if question.expected_answer:
            lines.append(f"Resposta esperada: {question.expected_answer}")
        lines.append("")
        lines.append("Descreva os conceitos envolvidos e como construir uma resposta completa.")
    return "\n".join(lines)


async def explain_question(llm_service: LLMService, question: Question) -> str:
    """Generate an explanation of a question's solution.

    Raises:
        RateLimitedError: If the provider is rate limiting requests
        QuestionGenerationError: If the provider fails
    """
    options = GenerationOptions(system_instruction=EXPLANATION_INSTRUCTION, temperature=0.3)
    logger.info(f"💡 Generating explanation for question {question.id}")
    return _unwrap(await llm_service.generate(build_explanation_prompt(question), options)).strip()
