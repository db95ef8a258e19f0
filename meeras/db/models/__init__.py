from meeras.db.models.categories import Category
from meeras.db.models.options import Option
from meeras.db.models.questions import Question

__all__ = [
    "Category",
    "Option",
    "Question",
]
