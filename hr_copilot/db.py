# db.py
from dotenv import load_dotenv
import os
import logging
import threading
import time
from typing import Dict, Iterable, List, Optional

from pinecone import Pinecone, ServerlessSpec
from langchain_openai import OpenAIEmbeddings
from langchain_community.document_loaders import TextLoader
from langchain_text_splitters import RecursiveCharacterTextSplitter
from langchain_pinecone import PineconeVectorStore
from langchain_core.documents import Document

load_dotenv()
logger = logging.getLogger(__name__)

# Output sizes of the OpenAI embedding models
EMBEDDING_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

_VSTORE_CACHE: Dict[str, PineconeVectorStore] = {}
_VSTORE_LOCK = threading.Lock()


# --- Clients ---
def _get_pinecone_client() -> Pinecone:
    api_key = os.getenv("PINECONE_API_KEY")
    if not api_key:
        raise ValueError("PINECONE_API_KEY is not set in the environment.")
    return Pinecone(api_key=api_key)


def get_embeddings() -> OpenAIEmbeddings:
    return OpenAIEmbeddings(model=os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"))


# --- Index management ---
def _index_exists(pc: Pinecone, name: str) -> bool:
    indexes = pc.list_indexes()
    if hasattr(indexes, "names"):
        return name in indexes.names()
    return name in {getattr(i, "name", None) or i.get("name") for i in (indexes or [])}


def ensure_index(name: str, dimension: Optional[int] = None) -> None:
    """Create the serverless index if missing and wait until it is ready."""
    pc = _get_pinecone_client()
    if _index_exists(pc, name):
        logger.info(f"Pinecone index '{name}' already exists.")
        return

    if dimension is None:
        dimension = EMBEDDING_DIMENSIONS.get(os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"), 1536)

    logger.info(f"Creating Pinecone index '{name}' (dimension={dimension}).")
    pc.create_index(
        name=name,
        dimension=dimension,
        metric="cosine",
        spec=ServerlessSpec(
            cloud=os.getenv("PINECONE_CLOUD", "aws"),
            region=os.getenv("PINECONE_REGION", "us-east-1"),
        ),
    )
    for _ in range(30):
        if pc.describe_index(name).status["ready"]:
            break
        time.sleep(2)
    else:
        raise RuntimeError(f"Pinecone index '{name}' was not ready after 60s")
    logger.info(f"Pinecone index ready: {name}")


# --- Vector stores ---
def get_vectorstore(index_name: str) -> PineconeVectorStore:
    """
    Lazy per-index vectorstore handle
    - connects to an existing index, never uploads anything
    - cached by index name for the life of the process
    """
    with _VSTORE_LOCK:
        if index_name in _VSTORE_CACHE:
            return _VSTORE_CACHE[index_name]

    vs = PineconeVectorStore.from_existing_index(
        index_name=index_name,
        embedding=get_embeddings(),
    )

    with _VSTORE_LOCK:
        return _VSTORE_CACHE.setdefault(index_name, vs)


def clear_cache() -> None:
    with _VSTORE_LOCK:
        _VSTORE_CACHE.clear()


# --- Ingestion ---
def load_and_split(file_path: str, chunk_size: int = 1000, chunk_overlap: int = 200) -> List[Document]:
    docs = TextLoader(file_path, encoding="utf-8").load()
    splitter = RecursiveCharacterTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    chunks = splitter.split_documents(docs)
    base = os.path.basename(file_path)
    for i, chunk in enumerate(chunks):
        chunk.metadata["source"] = f"{base}#chunk-{i}"
    return chunks


def index_documents(index_name: str, file_paths: Iterable[str]) -> int:
    """Split the given text files and upsert them into the index. Returns the chunk count."""
    chunks: List[Document] = []
    for path in file_paths:
        if not os.path.exists(path):
            logger.warning(f"{path} does not exist, skipping.")
            continue
        chunks.extend(load_and_split(path))

    if not chunks:
        logger.warning(f"No documents to index into '{index_name}'.")
        return 0

    ensure_index(index_name)
    vs = get_vectorstore(index_name)
    vs.add_documents(chunks)
    logger.info(f"Indexed {len(chunks)} chunks into '{index_name}'.")
    return len(chunks)
