from ...schemas.analysis.analysis import Subject

ANALYSIS_SYSTEM_INSTRUCTION = "Always respond in Simplified Chinese. Format mathematical symbols clearly."

# Gemini response schemas (OpenAPI subset accepted by generation_config.response_schema)
ANALYSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "mistakeDiagnosis": {
            "type": "STRING",
            "description": "A friendly analysis of what the student likely did wrong or misunderstood.",
        },
        "coreConcept": {
            "type": "STRING",
            "description": "The name of the physics/math/chemistry/english concept involved.",
        },
        "stepByStepSolution": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "A step-by-step correct solution or analysis of the problem.",
        },
        "practiceQuestion": {
            "type": "OBJECT",
            "properties": {
                "question": {"type": "STRING", "description": "A new, similar problem for practice."},
                "answer": {"type": "STRING", "description": "The final answer to the practice problem."},
                "explanation": {"type": "STRING", "description": "Brief explanation of the practice problem."},
            },
            "required": ["question", "answer", "explanation"],
        },
    },
    "required": ["mistakeDiagnosis", "coreConcept", "stepByStepSolution", "practiceQuestion"],
}

VOCABULARY_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "topic": {"type": "STRING"},
        "words": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "word": {"type": "STRING"},
                    "pronunciation": {"type": "STRING", "description": "IPA pronunciation"},
                    "definition": {"type": "STRING", "description": "Concise Chinese definition"},
                    "example": {"type": "STRING", "description": "English example sentence using the word"},
                },
                "required": ["word", "pronunciation", "definition", "example"],
            },
        },
    },
    "required": ["topic", "words"],
}


def build_analysis_prompt(text: str, subject: Subject) -> str:
    name = subject.label
    return f"""
    你是一名中国资深高中{name}教师。
    请帮助学生分析这道{name}错题。

    任务：
    1. 诊断错误：分析学生可能在哪里出错（思路、计算、语法等），语气要鼓励且专业。
    2. 核心考点：明确指出这道题考察的知识点。
    3. 正确解析：给出详细的步骤解析（如果是英语题，请进行语法拆解或篇章分析）。
    4. 举一反三：出一道考察相同知识点的变式题。

    题目内容：{text}
    """


def build_vocabulary_prompt(topic: str) -> str:
    return f"""
    为高中生生成一份关于 "{topic}" 的英语词汇表。

    要求：
    1. 选取 5-8 个与该主题高度相关且符合高考大纲要求的单词或短语。
    2. 难度适中（高中英语水平）。
    3. 提供音标、中文释义和例句。
    4. 不要重复提供。
    """
