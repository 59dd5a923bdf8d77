from hockey_cms.core.collection import CollectionConfig
from typing import Dict

TRIVIA_FILTERS = ("theme", "category", "difficulty")

MULTIPLE_CHOICE = CollectionConfig(
    table="trivia_multiple_choice",
    label="multiple choice question",
    search_columns=("question_text", "correct_answer"),
    public_columns="id, question_text, correct_answer, wrong_answers, explanation, category, theme, difficulty, attribution, published_at",
    filter_columns=TRIVIA_FILTERS,
)

TRUE_FALSE = CollectionConfig(
    table="trivia_true_false",
    label="true/false question",
    search_columns=("question_text",),
    public_columns="id, question_text, is_true, explanation, category, theme, difficulty, attribution, published_at",
    filter_columns=TRIVIA_FILTERS,
)

WHO_AM_I = CollectionConfig(
    table="trivia_who_am_i",
    label="who am I question",
    search_columns=("question_text", "correct_answer"),
    public_columns="id, question_text, correct_answer, explanation, category, theme, difficulty, attribution, published_at",
    filter_columns=TRIVIA_FILTERS,
)

# question_type value -> table config
TRIVIA_CONFIGS: Dict[str, CollectionConfig] = {
    "multiple-choice": MULTIPLE_CHOICE,
    "true-false": TRUE_FALSE,
    "who-am-i": WHO_AM_I,
}
