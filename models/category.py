from models.base_model import NamedModel


class Category(NamedModel):
    def __init__(self, id: int, name: str):
        super().__init__(id=id, name=name)
