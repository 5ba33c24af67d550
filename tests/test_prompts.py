"""Tests for ConsolePrompter with scripted input."""

from datadirectory.prompts import ConsolePrompter


def scripted(answers):
    """Return (input_func, questions) where input_func replays answers."""
    answers = list(answers)
    questions = []

    def input_func(question):
        questions.append(question)
        return answers.pop(0)

    return input_func, questions


def test_prompt_free_text():
    input_func, questions = scripted(["  chop  "])
    prompter = ConsolePrompter(input_func=input_func)

    assert prompter.prompt("site name") == "chop"
    assert questions == ["Please provide site name: "]


def test_prompt_reprompts_until_valid_choice():
    input_func, questions = scripted(["visits", "", "Person"])
    printed = []
    prompter = ConsolePrompter(input_func=input_func, output_func=printed.append)

    answer = prompter.prompt("table", ["care_site", "person"])

    assert answer == "Person"
    assert len(questions) == 3
    assert printed == ["Invalid input, please choose from 'care_site, person'."] * 2


def test_prompt_choice_is_case_insensitive():
    input_func, _ = scripted(["PEDSNET"])
    prompter = ConsolePrompter(input_func=input_func, output_func=lambda _: None)

    assert prompter.prompt("common data model name", ["omop", "pedsnet"]) == "PEDSNET"
