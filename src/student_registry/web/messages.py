"""
student_registry.web.messages

User-facing notification texts (pt-BR).
"""

from __future__ import annotations

from student_registry.web.flash import Toast

STUDENT_CREATED = Toast("Aluno cadastrado!", "O aluno foi adicionado com sucesso.")
STUDENT_UPDATED = Toast("Aluno atualizado!", "Os dados do aluno foram atualizados com sucesso.")
STUDENT_REMOVED = Toast("Aluno removido!", "O aluno foi excluído com sucesso.")

SESSION_EXPIRED = Toast("Sessão expirada", "Faça login novamente.", "destructive")
SIGN_UP_CONFIRM_EMAIL = Toast("Cadastro realizado!", "Verifique seu email para confirmar a conta.")


def load_failed(message: str) -> Toast:
    return Toast("Erro ao carregar alunos", message, "destructive")


def student_unavailable(message: str) -> Toast:
    return Toast("Erro ao carregar aluno", message, "destructive")


def save_failed(message: str | None) -> Toast:
    return Toast("Erro", message or "Ocorreu um erro ao salvar os dados.", "destructive")


def delete_failed(message: str | None) -> Toast:
    return Toast("Erro", message or "Ocorreu um erro ao excluir o aluno.", "destructive")


def sign_in_failed(message: str | None) -> Toast:
    return Toast("Erro ao entrar", message or "Não foi possível entrar.", "destructive")


def sign_up_failed(message: str | None) -> Toast:
    return Toast("Erro ao cadastrar", message or "Não foi possível criar a conta.", "destructive")
