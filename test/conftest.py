from pathlib import Path 
import pytest 

@pytest.fixture
def examples_dir(): 
    test_dir = Path(__file__).parent 
    return test_dir / 'example' 

@pytest.fixture 
def simple_fasta(examples_dir): 
    return examples_dir / 'simple.fasta'

@pytest.fixture 
def reference_fna(examples_dir): 
    return examples_dir / 'reference.fna'

@pytest.fixture 
def query_fna(examples_dir): 
    return examples_dir / 'query.fna'

@pytest.hookimpl()
def pytest_sessionfinish(session: pytest.Session, exitstatus):
    print(f"Collected {session.testscollected}, Failed {session.testsfailed}")
    print(f"Exit status: {exitstatus}")
