# file: reportaxial/core/errors.py

"""
Erros de domínio do ReportAxial.

Os serviços levantam estas exceções; os handlers registados em
`reportaxial.main` convertem-nas na resposta HTTP correspondente,
sempre com um `kind` legível por máquina e nunca com o stack trace.
"""


class ProblemServiceError(Exception):
    kind = "internal"
    status_code = 500

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail()
        super().__init__(self.detail)

    @classmethod
    def default_detail(cls) -> str:
        return "Erro interno"

    def __str__(self) -> str:
        return f"[{self.kind}] {self.detail}"


class UnauthorizedError(ProblemServiceError):
    kind = "unauthorized"
    status_code = 401

    @classmethod
    def default_detail(cls) -> str:
        return "Token não fornecido ou inválido"


class ForbiddenError(ProblemServiceError):
    kind = "forbidden"
    status_code = 403

    @classmethod
    def default_detail(cls) -> str:
        return "Acesso negado"


class NotFoundError(ProblemServiceError):
    kind = "not_found"
    status_code = 404

    @classmethod
    def default_detail(cls) -> str:
        return "Recurso não encontrado"


class InvalidInputError(ProblemServiceError):
    kind = "invalid_input"
    status_code = 400

    @classmethod
    def default_detail(cls) -> str:
        return "Dados inválidos"


class ConflictError(ProblemServiceError):
    """Escrita concorrente sobre o mesmo problema; o cliente pode repetir."""

    kind = "conflict"
    status_code = 409

    @classmethod
    def default_detail(cls) -> str:
        return "Conflito de escrita concorrente, tente novamente"


class InternalError(ProblemServiceError):
    pass
