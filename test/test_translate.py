import pytest
from nwaligner.translate import CODON_TABLE, TranslationError, translate

def test_codon_table(): 
    assert len(CODON_TABLE) == 64 
    assert CODON_TABLE['ATG'] == 'M'
    assert CODON_TABLE['TTT'] == 'F'
    assert CODON_TABLE['GGG'] == 'G'
    assert CODON_TABLE['TGG'] == 'W'
    assert sorted(c for (c, aa) in CODON_TABLE.items() if aa == '*') == ['TAA', 'TAG', 'TGA']

def test_codon_table_is_read_only(): 
    with pytest.raises(TypeError): 
        CODON_TABLE['ATG'] = 'X'

def test_translate_stops_at_stop_codon(): 
    assert translate('ATGAAATAGGGG') == 'MK'

def test_translate_starts_at_first_atg(): 
    assert translate('ccATGGCCtaa') == 'MA'

def test_translate_rna(): 
    assert translate('AUGUUUUGA') == 'MF'

def test_translate_unknown_codon(): 
    assert translate('ATGNNNGCC') == 'MXA'

def test_translate_drops_partial_codon(): 
    assert translate('ATGAA') == 'M'

def test_translate_without_start(): 
    with pytest.raises(TranslationError): 
        translate('CCCGGG')
    with pytest.raises(ValueError): 
        translate('')

def test_translate_example(reference_fna, query_fna): 
    from nwaligner.fasta import read_fasta_record
    (_, ref) = read_fasta_record(reference_fna)
    (_, qry) = read_fasta_record(query_fna)
    assert translate(ref) == 'MFVFLVLLPLVSSQCVNLTTRTQLPPA'
    assert translate(qry) == translate(ref)
