from hockey_cms.core.collection import build_admin_router, build_public_router
from hockey_cms.modules.collections.schemas import (
    StatCreate, StatUpdate,
    GreetingCreate, GreetingUpdate,
    MotivationalCreate, MotivationalUpdate,
    WisdomCreate, WisdomUpdate,
)
from hockey_cms.modules.collections.service import STATS, GREETINGS, MOTIVATIONAL, WISDOM

stats_router = build_admin_router("/stats", STATS, StatCreate, StatUpdate)
greetings_router = build_admin_router("/greetings", GREETINGS, GreetingCreate, GreetingUpdate)
motivational_router = build_admin_router("/motivational", MOTIVATIONAL, MotivationalCreate, MotivationalUpdate)
wisdom_router = build_admin_router("/wisdom", WISDOM, WisdomCreate, WisdomUpdate)

routers = [
    stats_router,
    greetings_router,
    motivational_router,
    wisdom_router,
    build_public_router("/stats", STATS),
    build_public_router("/greetings", GREETINGS),
    build_public_router("/motivational", MOTIVATIONAL),
    build_public_router("/wisdom", WISDOM),
]
