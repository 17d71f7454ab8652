"""Relational persistence Port Interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..domain import ComponentDescriptor, Document, DocumentStatus


class DocumentRepositoryPort(ABC):
    """Abstract interface for document records."""

    @abstractmethod
    def create_document(self, document: Document) -> Document: ...

    @abstractmethod
    def get_document(self, document_id: str) -> Document | None: ...

    @abstractmethod
    def get_documents_by_ids(self, document_ids: Iterable[str]) -> dict[str, Document]:
        """Batch lookup keyed by id; missing ids are simply absent."""
        ...

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """All documents, newest first."""
        ...

    @abstractmethod
    def set_document_status(self, document_id: str, status: DocumentStatus) -> None: ...

    @abstractmethod
    def count_documents(self) -> int: ...


class ComponentRegistryPort(ABC):
    """Abstract interface for the UI component registry."""

    @abstractmethod
    def list_active_components(self) -> list[ComponentDescriptor]:
        """Active descriptors ordered by descending priority."""
        ...

    @abstractmethod
    def get_component_by_name(self, name: str) -> ComponentDescriptor | None: ...

    @abstractmethod
    def create_component(self, component: ComponentDescriptor) -> ComponentDescriptor: ...
