import os
from langchain_openai import ChatOpenAI
from dotenv import load_dotenv

# Load .env
load_dotenv()


def get_llm(role: str = "gen") -> ChatOpenAI:
    """
    Factory returning the chat model used by each part of the copilot.

    Args:
        role (str): which model to build
            - "gen": response synthesis
            - "agent": document QA agent

    Returns:
        ChatOpenAI: configured chat model instance

    Environment Variables:
        - OPENAI_API_KEY: OpenAI API key (required)
        - GEN_LLM / AGENT_LLM: model names
        - GEN_TEMPERATURE / GEN_MAX_TOKENS: generation options
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY is not set in the environment.")

    model_map = {
        "gen": os.getenv("GEN_LLM", "gpt-4.1"),
        "agent": os.getenv("AGENT_LLM", "gpt-4.1-mini"),
    }
    model_name = model_map.get(role, model_map["gen"])

    # The agent follows tool results closely, so it runs cold
    temperature = float(os.getenv("GEN_TEMPERATURE", "0.7")) if role == "gen" else 0
    max_tokens = int(os.getenv("GEN_MAX_TOKENS", "1024"))

    try:
        return ChatOpenAI(
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            max_retries=0,
            api_key=api_key,
        )
    except Exception as e:
        raise RuntimeError(f"Failed to initialize LLM (role: {role}, model: {model_name}): {str(e)}")
