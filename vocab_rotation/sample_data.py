"""Built-in word set used when neither a cached nor a bundled pool is available."""

from typing import List

from .models import Definition, Difficulty, ExampleSentence, WordRecord


def _ja(id, word, pos, pronunciation, translation, original, romanization, sentence, difficulty, alternate=None):
    return WordRecord(
        id=id,
        word=word,
        part_of_speech=pos,
        pronunciation=pronunciation,
        language_code="ja",
        alternate_script=alternate,
        translation=translation,
        translation_language_code="en",
        example_sentences=[ExampleSentence(original=original, romanization=romanization, translation=sentence)],
        difficulty=difficulty,
    )


def _en(id, word, pos, pronunciation, definitions, origin, synonyms, difficulty):
    return WordRecord(
        id=id,
        word=word,
        part_of_speech=pos,
        pronunciation=pronunciation,
        language_code="en",
        definitions=[Definition(text=text, number=i) for i, text in enumerate(definitions, 1)],
        origin=origin,
        synonyms=synonyms,
        difficulty=difficulty,
    )


def sample_words() -> List[WordRecord]:
    return [
        # Japanese words (for learning Japanese)
        _ja("ja-yasai", "やさい", "noun", "ya·sa·i", "vegetable",
            "わたしはまいにちやさいをたべます。", "Watashi wa mainichi yasai o tabemasu.",
            "I eat vegetables every day.", Difficulty.EASY, alternate="野菜"),
        _ja("ja-watashi", "わたし", "pronoun", "wa·ta·shi", "I, me",
            "わたしはがくせいです。", "Watashi wa gakusei desu.",
            "I am a student.", Difficulty.EASY, alternate="私"),
        _ja("ja-anata", "あなた", "pronoun", "a·na·ta", "you",
            "あなたはだれですか。", "Anata wa dare desu ka.",
            "Who are you?", Difficulty.EASY),
        _ja("ja-tomodachi", "ともだち", "noun", "to·mo·da·chi", "friend",
            "かのじょはわたしのともだちです。", "Kanojo wa watashi no tomodachi desu.",
            "She is my friend.", Difficulty.MEDIUM, alternate="友達"),
        _ja("ja-benkyou", "べんきょう", "noun", "ben·kyō", "study",
            "まいにちべんきょうします。", "Mainichi benkyō shimasu.",
            "I study every day.", Difficulty.MEDIUM, alternate="勉強"),

        # English words (for advanced native vocabulary)
        _en("en-tergiversate", "tergiversate", "verb", "ter·gi·ver·sate",
            ["make conflicting or evasive statements; equivocate.",
             "change one's loyalties; be apostate."],
            "mid 17th century: from Latin tergiversari, from tergum 'back' + vertere 'to turn'.",
            ["weasel", "beat about the bush", "equivocate"], Difficulty.HARD),
        _en("en-esoteric", "esoteric", "adjective", "es·o·ter·ic",
            ["intended for or likely to be understood by only a small number of people "
             "with a specialized knowledge or interest."],
            "mid 17th century: from Greek esōterikos, from esōterō, comparative of esō 'within'.",
            ["abstruse", "obscure", "arcane", "recondite"], Difficulty.HARD),
        _en("en-irrefutable", "irrefutable", "adjective", "ir·ref·u·ta·ble",
            ["impossible to deny or disprove."],
            "early 17th century: from late Latin irrefutabilis, from in- 'not' + refutabilis.",
            ["indisputable", "undeniable", "unquestionable", "incontrovertible"], Difficulty.MEDIUM),
        _en("en-acquiesce", "acquiesce", "verb", "ac·qui·esce",
            ["accept something reluctantly but without protest."],
            "early 17th century: from Latin acquiescere, from ad- 'to, at' + quiescere 'to rest'.",
            ["consent", "agree", "comply", "concur"], Difficulty.MEDIUM),
        _en("en-wanton", "wanton", "adjective", "wan·ton",
            ["deliberate and unprovoked.", "growing profusely; luxuriant."],
            "Middle English wantowen 'rebellious, lacking discipline'.",
            ["deliberate", "willful", "malicious", "gratuitous"], Difficulty.HARD),
        _en("en-ken", "ken", "noun", "ken",
            ["one's range of knowledge or sight."],
            "mid 16th century: from ken (verb), from Old English cennan 'tell, make known'.",
            ["knowledge", "understanding", "awareness", "perception"], Difficulty.MEDIUM),
    ]
