from hockey_cms.core.collection import build_admin_router, build_public_router
from hockey_cms.modules.trivia.schemas import (
    MultipleChoiceCreate, MultipleChoiceUpdate,
    TrueFalseCreate, TrueFalseUpdate,
    WhoAmICreate, WhoAmIUpdate,
)
from hockey_cms.modules.trivia.service import MULTIPLE_CHOICE, TRUE_FALSE, WHO_AM_I

multiple_choice_router = build_admin_router(
    "/multiple-choice-trivia", MULTIPLE_CHOICE, MultipleChoiceCreate, MultipleChoiceUpdate
)
true_false_router = build_admin_router(
    "/true-false-trivia", TRUE_FALSE, TrueFalseCreate, TrueFalseUpdate
)
who_am_i_router = build_admin_router(
    "/who-am-i-trivia", WHO_AM_I, WhoAmICreate, WhoAmIUpdate
)

public_multiple_choice_router = build_public_router("/multiple-choice-trivia", MULTIPLE_CHOICE)
public_true_false_router = build_public_router("/true-false-trivia", TRUE_FALSE)
public_who_am_i_router = build_public_router("/who-am-i-trivia", WHO_AM_I)

routers = [
    multiple_choice_router,
    true_false_router,
    who_am_i_router,
    public_multiple_choice_router,
    public_true_false_router,
    public_who_am_i_router,
]
