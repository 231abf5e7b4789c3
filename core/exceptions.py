# core/exceptions.py


class HabitGridError(Exception):
    """Базовая ошибка трекера"""


class LoadFailure(HabitGridError):
    """Не удалось загрузить цели из удалённого хранилища"""


class SaveFailure(HabitGridError):
    """Не удалось сохранить цель"""


class DeleteFailure(HabitGridError):
    """Не удалось удалить цель в удалённом хранилище"""


class ValidationFailure(HabitGridError):
    """Недопустимый ввод (например, пустое название)"""


class GoalNotFound(HabitGridError):
    def __init__(self, goal_id: str):
        super().__init__(f"Goal {goal_id} not found")
        self.goal_id = goal_id


class FutureDateError(HabitGridError):
    def __init__(self, key: str):
        super().__init__(f"Cannot mark future date {key}")
        self.key = key


class AuthError(HabitGridError):
    """Нет пользователя или провайдер авторизации вернул ошибку"""
