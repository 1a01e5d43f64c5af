"""Tests for the roadmap document schema."""

from skillpath.schemas.roadmap import (
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    RoadmapResponse,
    load_document,
    normalize_roadmap_data,
    resolve_resource,
)


class TestNormalization:
    def test_bare_phase_list(self):
        phases = [{"name": "A", "skills": []}]
        assert normalize_roadmap_data(phases) == {"phases": phases}

    def test_unknown_payload_is_empty(self):
        assert normalize_roadmap_data("oops") == {"phases": []}
        assert normalize_roadmap_data(None) == {"phases": []}

    def test_nested_legacy_payload(self):
        data = {"roadmap_data": [{"name": "A"}]}
        assert normalize_roadmap_data(data, LEGACY_SCHEMA_VERSION) == {"phases": [{"name": "A"}]}

    def test_canonical_payload_untouched(self):
        data = {"phases": [], "title": "x"}
        assert normalize_roadmap_data(data, CURRENT_SCHEMA_VERSION) is data


class TestDocument:
    def test_every_field_but_name_is_optional(self):
        document = load_document({"phases": [{"name": "A", "skills": [{"name": "s"}]}]})
        skill = document.phases[0].skills[0]
        assert skill.description == ""
        assert skill.resources == []
        assert skill.quiz == []
        assert skill.time_estimate is None
        assert not skill.has_quiz

    def test_null_lists(self):
        document = load_document(
            {"phases": [{"name": "A", "skills": [{"name": "s", "quiz": None, "resources": None}]}]}
        )
        assert document.phases[0].skills[0].quiz == []

    def test_legacy_time_estimate(self):
        document = load_document(
            [{"name": "A", "skills": [{"name": "s", "estimatedTime": "2 weeks"}]}],
            LEGACY_SCHEMA_VERSION,
        )
        assert document.phases[0].skills[0].time_estimate == "2 weeks"

    def test_day_range_wins_over_estimate(self):
        document = load_document(
            {"phases": [{"name": "A", "skills": [{"name": "s", "days": "Day 1-3", "estimatedTime": "1 week"}]}]}
        )
        assert document.phases[0].skills[0].time_estimate == "Day 1-3"

    def test_quiz_answers(self, roadmap_data):
        document = load_document(roadmap_data)
        quiz = document.phases[0].skills[0].quiz
        assert [q.correct_answer for q in quiz] == [0, 1, 2]
        assert quiz[0].options == ["A", "B", "C", "D"]

    def test_response_normalizes_legacy_rows(self):
        class Row:
            id = 1
            user_id = 1
            target_skill = "Designer"
            roadmap_data = [{"name": "A"}]
            schema_version = LEGACY_SCHEMA_VERSION
            created_at = "2024-01-01T00:00:00"

        response = RoadmapResponse.model_validate(Row())
        assert response.roadmap_data == {"phases": [{"name": "A"}]}


class TestResources:
    def test_url(self):
        link = resolve_resource("https://www.python.org/doc/", "Python")
        assert link.url == "https://www.python.org/doc/"
        assert link.label == "python.org"
        assert link.kind == "link"

    def test_youtube_label(self):
        link = resolve_resource("YouTube: Python for beginners", "Python")
        assert link.kind == "video"
        assert link.label == "Python for beginners"
        assert link.url == "https://www.youtube.com/results?search_query=Python+for+beginners"

    def test_other_label_searches_with_skill(self):
        link = resolve_resource("Official tutorial", "Pandas")
        assert link.kind == "search"
        assert link.label == "Official tutorial"
        assert link.url == "https://www.google.com/search?q=Official+tutorial+Pandas"

    def test_youtube_in_the_middle_is_a_search(self):
        link = resolve_resource("YouTube Analytics guide", "Marketing")
        assert link.kind == "search"
        assert link.url == "https://www.google.com/search?q=YouTube+Analytics+guide+Marketing"

    def test_youtube_prefix_is_case_insensitive(self):
        link = resolve_resource("youtube:Intro to SQL", "SQL")
        assert link.kind == "video"
        assert link.label == "Intro to SQL"


class TestLooseDocuments:
    def test_resource_objects_become_links(self):
        document = load_document(
            {
                "phases": [
                    {
                        "name": "A",
                        "skills": [
                            {
                                "name": "s",
                                "resources": [
                                    {"title": "Docs", "url": "https://docs.python.org/3/"},
                                    {"title": "YouTube: Python basics"},
                                    {"kind": "book"},
                                    "Official tutorial",
                                    None,
                                    42,
                                ],
                            }
                        ],
                    }
                ]
            }
        )
        skill = document.phases[0].skills[0]
        assert skill.resources == [
            "https://docs.python.org/3/",
            "YouTube: Python basics",
            "Official tutorial",
            "42",
        ]
        assert [link.kind for link in skill.resource_links()] == ["link", "video", "search", "search"]

    def test_single_resource_string(self):
        document = load_document({"phases": [{"name": "A", "skills": [{"name": "s", "resources": "Read the docs"}]}]})
        assert document.phases[0].skills[0].resources == ["Read the docs"]

    def test_null_and_scalar_fields_are_coerced(self):
        document = load_document(
            {
                "phases": [
                    {
                        "name": None,
                        "description": 7,
                        "duration_days": {"min": 3},
                        "skills": [{"name": 101, "description": None, "days": 3, "estimatedTime": ["x"]}],
                    }
                ]
            }
        )
        phase = document.phases[0]
        assert phase.name == ""
        assert phase.description == "7"
        assert phase.duration_days is None
        skill = phase.skills[0]
        assert skill.name == "101"
        assert skill.description == ""
        assert skill.time_estimate == "3"
        assert skill.estimated_time is None

    def test_malformed_quiz_questions_are_dropped(self):
        document = load_document(
            {
                "phases": [
                    {
                        "name": "A",
                        "skills": [
                            {
                                "name": "s",
                                "quiz": [
                                    {"question": "no options"},
                                    {"question": "empty", "options": []},
                                    "not a question",
                                    {"question": None, "options": [1, 2, None], "correctAnswer": "1"},
                                ],
                            }
                        ],
                    }
                ]
            }
        )
        quiz = document.phases[0].skills[0].quiz
        assert len(quiz) == 1
        assert quiz[0].question == ""
        assert quiz[0].options == ["1", "2", ""]
        assert quiz[0].correct_answer == 1

    def test_unusable_answer_index_is_none(self):
        document = load_document(
            {"phases": [{"name": "A", "skills": [{"name": "s", "quiz": [{"options": ["a"], "correctAnswer": "b"}]}]}]}
        )
        assert document.phases[0].skills[0].quiz[0].correct_answer is None

    def test_non_object_phases_and_skills_are_dropped(self):
        document = load_document(
            {"phases": ["intro", {"name": "A", "skills": ["s", None, {"name": "real"}]}, None]}
        )
        assert [phase.name for phase in document.phases] == ["A"]
        assert [skill.name for skill in document.phases[0].skills] == ["real"]

    def test_non_list_containers(self):
        document = load_document({"phases": [{"name": "A", "skills": {"name": "s"}}]})
        assert document.phases[0].skills == []
        assert load_document({"phases": "none yet"}).phases == []
