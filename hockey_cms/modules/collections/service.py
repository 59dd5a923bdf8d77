from hockey_cms.core.collection import CollectionConfig

STATS = CollectionConfig(
    table="collection_stats",
    label="stat",
    search_columns=("stat_text",),
    public_columns="id, stat_text, stat_value, stat_category, year, theme, category, attribution, published_at",
)

GREETINGS = CollectionConfig(
    table="collection_greetings",
    label="greeting",
    search_columns=("greeting_text",),
    public_columns="id, greeting_text, attribution, published_at",
    filter_columns=(),
)

MOTIVATIONAL = CollectionConfig(
    table="collection_motivational",
    label="motivational quote",
    search_columns=("quote", "context"),
    public_columns="id, quote, context, theme, category, attribution, published_at",
)

WISDOM = CollectionConfig(
    table="collection_wisdom",
    label="wisdom entry",
    search_columns=("title", "musing"),
    public_columns="id, title, musing, from_the_box, theme, category, attribution, published_at",
)
