from models.base_model import NamedModel


class Publisher(NamedModel):
    def __init__(self, id: int, name: str):
        # Publications reference their publisher; the reverse list is computed
        # on demand by CatalogService.publications_by_publisher.
        super().__init__(id=id, name=name)
