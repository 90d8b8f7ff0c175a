from pydantic import BaseModel, ConfigDict, Field


class RetrievedDocument(BaseModel):
    """A stored document returned by a nearest-neighbour query.

    Metadata fields fall back to placeholder text when the vector store
    has none, so prompt formatting never has to special-case them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Vector id")
    score: float = Field(description="Similarity score")
    url: str = Field(default="", description="Source URL")
    title: str = Field(default="No title provided")
    date: str = Field(default="No date provided")
    assistant: str = Field(default="No text metadata", description="Stored document text")
