from meeras.db.repo.categories_repo import CategoriesRepo
from meeras.db.repo.options_repo import OptionsRepo
from meeras.db.repo.questions_repo import QuestionsRepo
