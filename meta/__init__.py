from meta.meta import Meta
