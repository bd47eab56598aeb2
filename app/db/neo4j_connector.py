from neo4j import GraphDatabase

from app.config import get_neo4j_config

_driver = None


def get_driver():
    """Return a shared Neo4j driver instance, creating it on first use."""
    global _driver
    if _driver is None:
        uri, user, pwd = get_neo4j_config()
        try:
            _driver = GraphDatabase.driver(uri, auth=(user, pwd))
        except Exception as exc:
            raise RuntimeError(
                f"Failed to create Neo4j driver for URI '{uri}'. Check that the database is running and the credentials are correct.\nError: {exc}"
            ) from exc
    return _driver


def close_driver():
    global _driver
    if _driver is not None:
        _driver.close()
        _driver = None


def run_cypher(query: str, parameters: dict = None):
    """Run a Cypher statement and return its records as dicts."""
    driver = get_driver()
    with driver.session() as session:
        result = session.run(query, parameters or {})
        return [record.data() for record in result]
