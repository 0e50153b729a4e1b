"""
Preprocessing module for turning raw text into index terms.
Includes tokenization, lowercase conversion, length and stop word filtering.
"""
from .tokenizer import Token, Tokenizer, RegexMatchTokenizer
from .preprocess import PreprocessingPipeline, TextProcessor, create_pipeline
from .document import Document, DocumentStatistics
