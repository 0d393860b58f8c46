from .vertex_deduplication import merge_duplicate_vertices, repair_duplicate_vertices, DEDUP_METHODS
