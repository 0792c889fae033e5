import logging
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import curriculum_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


README_MD = """\
# Curriculum

Start with [HTML](04-html/01-intro.md).
"""

HTML_INTRO_MD = """\
# HTML Basics

## Overview
HTML structures web pages.

## 1. Elements
Elements are written as tags.

```yaml
# not a heading
server:
  port: 8080
```

## 2. Attributes
Attributes configure elements. See [CSS](../05-css/01-selectors.md).

## Summary Checklist
- [x] Write an element
- [ ] Add an attribute

## Next Steps
Proceed to Module 05: [CSS Selectors](../05-css/01-selectors.md)
"""

CSS_SELECTORS_MD = """\
# CSS Selectors

## Overview
Selectors pick elements to style.

## 1. Class Selectors
Use `.name` to match a class.

```css
.card { color: red; }
```

## Summary Checklist
- Use a class selector

## Next Steps
Continue with [the HTML recap](../04-html/01-intro.md).
"""

MCQ_MD = """\
# Week 5 MCQ

### Q1. What does HTML stand for?
**Topic:** HTML

A) Hyper Text Markup Language
B) High Tech Modern Language
C) Home Tool Markup Language
D) Hyperlinks and Text Markup Language

### Q2. Which selector matches a class? [Topic: CSS]
A) #card
B) .card
C) card
D) card > p

### Q3. Which annotation marks a Spring Boot entry point?
**Topic:** Spring Boot

A) @Component
B) @SpringBootApplication
C) @Entity
D) @Bean

### Q4. What does a dependency injection container supply?
**Topic:** Spring Boot

A) Collaborators
B) Stylesheets
C) Database rows
D) HTTP status codes
"""

MCQ_ANSWERS_MD = """\
# Week 5 Answers

### Q1
**Answer: A**
Explanation: HTML stands for Hyper Text Markup Language.

### Q2
**Answer: B**
Explanation: A leading dot selects by class.

### Q3
**Answer: B**
Explanation: It combines configuration and component scanning.

### Q4
**Answer: A**
Explanation: The container supplies collaborators to beans.
"""

INTERVIEW_MD = """\
# Week 6 Interview Questions

## Student 1

### Q1 (Easy): What is Spring Boot?
**Answer:** An opinionated way to build Spring applications.

### Q2 (Easy): What is a bean?
**Answer:** An object managed by the Spring container.

### Q3 (Medium): What does @Autowired do?
**Answer:** It asks the container to inject a dependency.

### Q4 (Medium): How do you change the server port?
**Answer:** Set server.port in application.properties.

### Q5 (Hard): How does auto-configuration decide what to create?
**Answer:** Conditional annotations inspect the classpath and existing beans.

## Student 2

### Q1 (Easy): What is REST?
**Answer:** An architectural style for web APIs built on HTTP resources.

### Q2 (Easy): Which HTTP method replaces a whole resource?
**Answer:** PUT replaces the resource.

### Q3 (Medium): How do @Controller and @RestController differ?
**Answer:** @RestController adds @ResponseBody to every handler.

### Q4 (Medium): How do you validate a request body?
**Answer:** Annotate it with @Valid and add constraint annotations.

### Q5 (Hard): How would you version a public API?
**Answer:** Use a URL or header version and keep old versions running.
"""

HELLO_APPLICATION_JAVA = """\
package com.example;

import org.springframework.boot.SpringApplication;
import org.springframework.boot.autoconfigure.SpringBootApplication;

@SpringBootApplication
public class HelloApplication {
    public static void main(String[] args) {
        SpringApplication.run(HelloApplication.class, args);
        System.out.println("Started on port 8080");
    }
}
"""

HELLO_TEST_JAVA = """\
package com.example;

import org.junit.jupiter.api.Test;

class HelloApplicationTests {
    @Test
    void contextLoads() {
    }
}
"""

SAMPLE_FILES = {
    "README.md": README_MD,
    "04-html/01-intro.md": HTML_INTRO_MD,
    "05-css/01-selectors.md": CSS_SELECTORS_MD,
    "week-05/mcq.md": MCQ_MD,
    "week-05/mcq-answers.md": MCQ_ANSWERS_MD,
    "week-06/interview-questions.md": INTERVIEW_MD,
    "resources/demo/spring/README.md": "# Spring Demos\n\nOne project per stage.\n",
    "resources/demo/spring/stage-1-hello/pom.xml": "<project></project>\n",
    "resources/demo/spring/stage-1-hello/src/main/java/com/example/HelloApplication.java": HELLO_APPLICATION_JAVA,
    "resources/demo/spring/stage-1-hello/src/main/resources/application.properties": "server.port=8080\n",
    "resources/demo/spring/stage-1-hello/src/test/java/com/example/HelloApplicationTests.java": HELLO_TEST_JAVA,
}


def write_files(root: Path, files: dict) -> Path:
    """Write relative path -> text into root."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


# Common test fixtures
@pytest.fixture
def sample_corpus(tmp_path: Path) -> Path:
    """
    Small lint-clean curriculum.

    Two modules (04-html, 05-css), week-05 with four answered MCQs over
    the topics HTML, CSS and Spring Boot, week-06 with two five-question
    interview sets, and one single-service Spring demo stage.
    """
    return write_files(tmp_path / "curriculum", SAMPLE_FILES)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and levels the CLI attaches to the package logger."""
    yield
    logger = logging.getLogger("curriculum_toolkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
