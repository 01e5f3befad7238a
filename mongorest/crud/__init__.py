from .crudview import CollectionCrudViewMixin, CRUD_METHOD
