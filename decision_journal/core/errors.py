"""Error taxonomy. Every error carries a user-facing message and an HTTP status."""


class DecisionJournalError(Exception):
    """Base error rendered as {"error": message} with status_code."""

    status_code: int = 500
    default_message: str = "Erro desconhecido"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# ---------- generation proxy ----------

class GenerationError(DecisionJournalError):
    """Failure of the server-side generation proxy."""

    kind: str = "UnknownError"


class MissingTitle(GenerationError):
    kind = "MissingTitle"
    status_code = 400
    default_message = "Título é obrigatório"


class RateLimited(GenerationError):
    kind = "RateLimited"
    status_code = 429
    default_message = "Limite de requisições excedido. Tente novamente em alguns segundos."


class InsufficientCredits(GenerationError):
    kind = "InsufficientCredits"
    status_code = 402
    default_message = "Créditos insuficientes. Adicione créditos à sua conta."


class UpstreamError(GenerationError):
    kind = "UpstreamError"
    default_message = "Erro ao gerar alternativas"


class EmptyResponse(GenerationError):
    kind = "EmptyResponse"
    default_message = "Resposta vazia da IA"


class NoAlternativesProduced(GenerationError):
    kind = "NoAlternativesProduced"
    default_message = "Não foi possível gerar alternativas"


class UnknownError(GenerationError):
    kind = "UnknownError"


# ---------- client side ----------

class InvalidContext(DecisionJournalError):
    """Description too thin to generate from (soft gate)."""

    status_code = 422
    default_message = (
        "Descreva melhor o contexto da sua decisão (mínimo 20 caracteres). "
        "Inclua fatores como objetivos, restrições, preferências e critérios importantes."
    )


class GenerationFailure(DecisionJournalError):
    """Raised by alternative generators; message comes from the proxy or transport."""

    status_code = 502
    default_message = "Erro ao gerar alternativas"


# ---------- scenarios ----------

class ScenarioNotFound(DecisionJournalError):
    status_code = 404
    default_message = "Cenário não encontrado"


class AlternativeNotFound(DecisionJournalError):
    status_code = 404
    default_message = "Alternativa não encontrada"


class EmptyAlternativeText(DecisionJournalError):
    status_code = 422
    default_message = "O texto da alternativa não pode ser vazio"


class LastAlternativeError(DecisionJournalError):
    """A scenario must keep at least one alternative."""

    status_code = 409
    default_message = "O cenário precisa manter pelo menos uma alternativa"


# ---------- auth ----------

class NotAuthenticated(DecisionJournalError):
    status_code = 401
    default_message = "Usuário não autenticado"


class InvalidCredentials(DecisionJournalError):
    status_code = 401
    default_message = "Email ou senha inválidos"


class InvalidRegistration(DecisionJournalError):
    status_code = 400
    default_message = "Dados de cadastro inválidos"


class EmailAlreadyRegistered(DecisionJournalError):
    status_code = 409
    default_message = "Este email já está cadastrado"
