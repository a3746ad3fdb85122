"""
Response Synthesizer

Deterministic rule cascade that turns a learner message plus a
DecisionContext into a structured mentor response.

Rules are an ordered table of (predicate, handler) pairs. The first matching
predicate owns the response; handlers never fall through to another rule.
Only the video rule performs I/O (through the ResourceFetchGateway).
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from course_mentor.learner_context import DecisionContext
from course_mentor.resource_gateway import ResourceFetchGateway, ResourceItem, ResourceType
from course_mentor.response_formatter import format_response
from course_mentor.tone_classifier import STRUGGLE_KEYWORDS, Tone, classify, contains_any

logger = logging.getLogger(__name__)

# Keyword sets (substring match against the lower-cased message)
PROGRESS_KEYWORDS = ("how am i doing", "progress", "performance", "stats")
VIDEO_KEYWORDS = ("video", "watch", "tutorial", "youtube")
CONSISTENCY_KEYWORDS = ("consistency", "streak", "engagement")
DEEP_DIVE_KEYWORDS = ("explain", "what is", "how does")
MATERIAL_KEYWORDS = ("material", "resource", "reading")
QUIZ_KEYWORDS = ("quiz", "test", "question")
STUDY_KEYWORDS = ("how to learn", "study tips", "learn better", "improve")
GOAL_KEYWORDS = ("goal", "achieve", "want to learn")
RECOMMENDATION_KEYWORDS = ("recommend", "suggest", "should i", "what next")
GRATITUDE_KEYWORDS = ("thank", "thanks", "appreciate")

# Search vocabulary for video requests without a focused course
TOPIC_VOCABULARY = (
    "python",
    "javascript",
    "java",
    "c++",
    "rust",
    "go",
    "typescript",
    "react",
    "node",
    "machine learning",
    "ai",
    "data science",
    "web development",
    "programming",
    "blockchain",
    "cybersecurity",
)

# Score bands for progress queries
MASTERY_SCORE = 90
STRONG_SCORE = 75
DEVELOPING_SCORE = 60

# Recommendation bands
RECOMMEND_REVIEW_BELOW = 70
RECOMMEND_ADVANCE_FROM = 80

# Consistency bands (days)
STREAK_MASTER_DAYS = 30
STREAK_MOMENTUM_DAYS = 14
STREAK_BUILDING_DAYS = 7


@dataclass(frozen=True)
class ResponsePayload:
    """Final mentor response. `rule` names the cascade branch that produced it."""
    text: str
    tone: Tone
    resources: Tuple[ResourceItem, ...] = ()
    rule: str = "default"


@dataclass(frozen=True)
class RuleRequest:
    """Inputs handed to a rule handler."""
    message: str
    lowered: str
    context: DecisionContext
    tone: Tone


@dataclass
class Draft:
    """Unformatted handler output."""
    text: str
    tone: Tone
    resources: List[ResourceItem] = field(default_factory=list)


Predicate = Callable[[str, DecisionContext], bool]
Handler = Callable[[RuleRequest], Union[Draft, Awaitable[Draft]]]


@dataclass(frozen=True)
class ResponseRule:
    name: str
    predicate: Predicate
    handler: Handler


# ==================== Helpers ====================

def _num(value: float) -> str:
    """Render a score: 87.0 -> '87', 72.456 -> '72.5'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def _joined(items: Sequence[str], fallback: str, sep: str = ", ") -> str:
    return sep.join(items) if items else fallback


def _numbered(items: Sequence[str]) -> str:
    return "\n".join(f"{i + 1}. {item}" for i, item in enumerate(items))


def _keywords(words: Sequence[str]) -> Predicate:
    def predicate(lowered: str, context: DecisionContext) -> bool:
        return contains_any(lowered, words)
    return predicate


def _course_keywords(words: Sequence[str]) -> Predicate:
    def predicate(lowered: str, context: DecisionContext) -> bool:
        return context.course is not None and contains_any(lowered, words)
    return predicate


def resolve_video_topic(lowered: str, context: DecisionContext) -> Optional[str]:
    """
    Pick the search topic for a video request.

    Priority: focused course title, then the first vocabulary keyword found
    in the message, then the learner's first interest.
    """
    if context.course is not None:
        return context.course.title
    for keyword in TOPIC_VOCABULARY:
        if keyword in lowered:
            return keyword
    if context.learner.interests:
        return context.learner.interests[0]
    return None


class ResponseSynthesizer:
    """
    Rule-cascade response generator for the floating mentor.

    Usage:
        synthesizer = ResponseSynthesizer(gateway)
        payload = await synthesizer.synthesize("how am i doing?", context)
    """

    def __init__(
        self,
        gateway: Optional[ResourceFetchGateway] = None,
        video_search_limit: int = 5,
        video_display_count: int = 3,
    ):
        """
        Initialize ResponseSynthesizer.

        Args:
            gateway: Video search gateway (None disables live video search)
            video_search_limit: Results requested from the provider
            video_display_count: Videos embedded in a response
        """
        self.gateway = gateway or ResourceFetchGateway()
        self.video_search_limit = video_search_limit
        self.video_display_count = video_display_count
        self.rules: Tuple[ResponseRule, ...] = (
            ResponseRule("progress", _keywords(PROGRESS_KEYWORDS), self._respond_progress),
            ResponseRule("video", _keywords(VIDEO_KEYWORDS), self._respond_video),
            ResponseRule("consistency", _keywords(CONSISTENCY_KEYWORDS), self._respond_consistency),
            ResponseRule("course_deep_dive", _course_keywords(DEEP_DIVE_KEYWORDS), self._respond_course_deep_dive),
            ResponseRule("course_materials", _course_keywords(MATERIAL_KEYWORDS), self._respond_course_materials),
            ResponseRule("course_quiz", _course_keywords(QUIZ_KEYWORDS), self._respond_course_quiz),
            ResponseRule("study_strategy", _keywords(STUDY_KEYWORDS), self._respond_study_strategy),
            ResponseRule("struggle", _keywords(STRUGGLE_KEYWORDS), self._respond_struggle),
            ResponseRule("goals", _keywords(GOAL_KEYWORDS), self._respond_goals),
            ResponseRule("recommendation", _keywords(RECOMMENDATION_KEYWORDS), self._respond_recommendation),
            ResponseRule("gratitude", _keywords(GRATITUDE_KEYWORDS), self._respond_gratitude),
        )

    def select_rule(self, message: str, context: DecisionContext) -> Optional[ResponseRule]:
        """Return the first rule whose predicate matches, or None for the default."""
        lowered = message.lower()
        for rule in self.rules:
            if rule.predicate(lowered, context):
                return rule
        return None

    async def synthesize(self, message: str, context: DecisionContext) -> ResponsePayload:
        """
        Produce the mentor response for `message`.

        Args:
            message: Raw learner input
            context: DecisionContext snapshot for this request

        Returns:
            ResponsePayload with formatted text, tone and resources
        """
        tone = classify(message, context.performance)
        request = RuleRequest(message=message, lowered=message.lower(), context=context, tone=tone)

        rule = self.select_rule(message, context)
        rule_name = rule.name if rule else "default"
        handler = rule.handler if rule else self._respond_default

        draft = handler(request)
        if inspect.isawaitable(draft):
            draft = await draft

        logger.info(f"🧠 [ResponseSynthesizer] rule={rule_name} tone={draft.tone.value} resources={len(draft.resources)}")
        return ResponsePayload(
            text=format_response(draft.text),
            tone=draft.tone,
            resources=tuple(draft.resources),
            rule=rule_name,
        )

    # ==================== Progress ====================

    def _respond_progress(self, request: RuleRequest) -> Draft:
        ctx = request.context
        perf = ctx.performance
        name = ctx.learner.name
        score = _num(perf.average_score)
        streak = ctx.consistency.active_day_count

        if perf.total_quizzes == 0:
            return self._respond_progress_onboarding(request)

        if perf.average_score >= MASTERY_SCORE:
            text = f"""🌟 **Outstanding Performance, {name}!**

You're performing exceptionally well and demonstrating mastery!

📊 **Your Achievement Summary:**
• Average Score: **{score}%** (Excellent!)
• Quizzes Completed: **{perf.total_quizzes}**
• Total Credits Earned: **{perf.total_credits}**
• Stars Collected: **{perf.stars}** ⭐
• Learning Streak: **{streak} days** 🔥

💎 **Expert-Level Insights:**
You're in the top tier of learners! Your consistency and dedication are remarkable. Your learning patterns show strong comprehension and retention.

🎯 **Next Steps for Continued Excellence:**
• Challenge yourself with advanced topics
• Explore related subjects to broaden expertise
• Consider mentoring others to reinforce knowledge
• Set new ambitious learning goals

Keep pushing boundaries! 🚀"""
            resources = [
                ResourceItem(ResourceType.QUIZ, "Advanced Challenge Quizzes", "Test your mastery with harder questions"),
            ]
        elif perf.average_score >= STRONG_SCORE:
            text = f"""🎯 **Excellent Progress, {name}!**

You're making great strides in your learning journey!

📊 **Your Performance Metrics:**
• Average Score: **{score}%** (Very Good!)
• Quizzes Completed: **{perf.total_quizzes}**
• Total Credits Earned: **{perf.total_credits}**
• Stars Collected: **{perf.stars}** ⭐
• Learning Streak: **{streak} days**

✨ **Performance Analysis:**
You're doing really well! Your scores show solid understanding of core concepts. To reach the next level:

💡 **Personalized Recommendations:**
• Review course materials before quizzes for deeper understanding
• Watch video tutorials to reinforce visual learning
• Focus on areas where you scored below 80%
• Practice explaining concepts in your own words

You're on track for excellence! 📈"""
            resources = [
                ResourceItem(ResourceType.VIDEO, "Course Video Tutorials", "Reinforce concepts with visual learning"),
                ResourceItem(ResourceType.MATERIAL, "Course Materials", "Review key concepts and examples"),
            ]
        elif perf.average_score >= DEVELOPING_SCORE:
            text = f"""💪 **Solid Effort, {name}!**

You're building a strong foundation!

📊 **Your Learning Stats:**
• Average Score: **{score}%** (Good!)
• Quizzes Completed: **{perf.total_quizzes}**
• Total Credits Earned: **{perf.total_credits}**
• Stars Collected: **{perf.stars}** ⭐
• Learning Streak: **{streak} days**

🎓 **Growth Opportunity Analysis:**
You're making steady progress! Your scores indicate you're grasping the fundamentals. Let's optimize your learning approach:

🎯 **Tailored Study Strategy:**
• Spend more time with video tutorials (visual reinforcement)
• Take detailed notes while learning
• Break complex topics into smaller, manageable parts
• Rewatch videos for challenging concepts
• Practice with easier quizzes first to build confidence

Every step forward counts! 📚"""
            resources = [
                ResourceItem(ResourceType.VIDEO, "Foundational Video Tutorials", "Build strong understanding of basics"),
                ResourceItem(ResourceType.MATERIAL, "Study Materials", "Review and take detailed notes"),
                ResourceItem(ResourceType.QUIZ, "Practice Quizzes", "Reinforce learning with practice"),
            ]
        else:
            text = f"""🌱 **Every Expert Started Here, {name}!**

Learning is a journey, and you're taking important steps!

📊 **Your Current Stats:**
• Average Score: **{score}%**
• Quizzes Completed: **{perf.total_quizzes}**
• Total Credits Earned: **{perf.total_credits}**
• Stars Collected: **{perf.stars}** ⭐
• Learning Streak: **{streak} days**

💡 **Personalized Learning Plan:**
Don't be discouraged! Learning takes time, practice, and the right approach. Here's your customized strategy:

**Phase 1: Foundation Building**
1. Watch course videos multiple times (repetition aids retention)
2. Take detailed, organized notes
3. Start with easier quizzes to build confidence
4. Ask me questions about specific concepts

**Phase 2: Active Practice**
1. Practice explaining concepts out loud
2. Create simple examples for each topic
3. Review materials daily for 15-20 minutes
4. Celebrate small wins!

🎯 **Remember:**
• Progress > Perfection
• Every mistake is a learning opportunity
• Consistency beats intensity
• You've got this! 🚀

What specific topic would you like to focus on first?"""
            resources = [
                ResourceItem(ResourceType.VIDEO, "Beginner-Friendly Tutorials", "Start with fundamentals"),
                ResourceItem(ResourceType.MATERIAL, "Basic Course Materials", "Build your foundation"),
            ]

        return Draft(text, Tone.MOTIVATIONAL, resources)

    def _respond_progress_onboarding(self, request: RuleRequest) -> Draft:
        learner = request.context.learner
        text = f"""Welcome to your learning journey, {learner.name}! 🎓

You're just getting started, and that's exciting! Here's your personalized roadmap:

🎯 **Your Learning Profile:**
• Interests: {_joined(learner.interests, 'Explore various topics')}
• Learning Style: {learner.learning_style}
• Goals: {_joined(learner.goals, 'Set your goals in profile')}

📚 **Getting Started Guide:**

**Step 1: Explore**
Browse courses that match your interests and goals

**Step 2: Learn**
Watch video tutorials for visual understanding

**Step 3: Practice**
Take quizzes to track your progress and earn rewards

**Step 4: Grow**
Earn stars, credits, and badges as you advance

💡 **Pro Tip:** Start with topics you're passionate about. Passion fuels persistence!

I'm here to guide you every step of the way. What would you like to learn first?"""
        return Draft(text, Tone.GUIDING, [
            ResourceItem(ResourceType.VIDEO, "Getting Started Videos", "Begin your learning journey"),
        ])

    # ==================== Videos ====================

    async def _respond_video(self, request: RuleRequest) -> Draft:
        ctx = request.context
        topic = resolve_video_topic(request.lowered, ctx)

        if topic:
            videos = await self.gateway.search_videos(f"{topic} tutorial programming", self.video_search_limit)
            if videos:
                shown = videos[:self.video_display_count]
                video_list = "\n\n".join(
                    f"**{i + 1}. {v.title}**\n   {(v.description or '')[:100]}..." for i, v in enumerate(shown)
                )
                text = f"""🎥 **Fresh Video Tutorials for {topic}**

I've just fetched the latest, high-quality tutorials for you:

{video_list}

💡 **Learning Strategy:**
• Watch videos in order for progressive learning
• Take notes on key concepts
• Pause and practice along with the instructor
• Rewatch sections you find challenging
• Ask me questions about any concepts!

📚 After watching, feel free to discuss what you learned or ask for clarification on any topic!"""
                return Draft(text, Tone.EXPLANATORY, list(shown))

        if ctx.course is not None and ctx.course.videos:
            course = ctx.course
            top_videos = course.videos[:self.video_display_count]
            video_list = "\n\n".join(
                f"**{i + 1}. {v.title}**\n   {v.description}" for i, v in enumerate(top_videos)
            )
            text = f"""🎥 **Curated Videos for {course.title}**

Here are the best tutorials for your current course:

{video_list}

💡 **How to Use These Videos:**
• Check the course card's "Show Course Videos" section
• Videos are embedded for immediate playback
• Watch at your own pace
• Take notes on important concepts
• Practice what you learn

These videos are specifically selected for your learning level. Ready to dive in? 📚"""
            resources = [ResourceItem(ResourceType.VIDEO, v.title, v.description, v.url) for v in top_videos]
            return Draft(text, Tone.EXPLANATORY, resources)

        text = """🎥 **Video Tutorial Search**

I can help you find the perfect video tutorials! Just tell me:

• What topic you want to learn (e.g., Python, JavaScript, Machine Learning)
• Your skill level (beginner, intermediate, advanced)
• Specific concepts you're interested in

I'll fetch fresh, high-quality YouTube tutorials tailored to your needs in real-time! 🎓

What would you like to learn about?"""
        return Draft(text, Tone.GUIDING)

    # ==================== Consistency ====================

    def _respond_consistency(self, request: RuleRequest) -> Draft:
        name = request.context.learner.name
        days = request.context.consistency.active_day_count

        if days >= STREAK_MASTER_DAYS:
            text = f"""🔥 **Incredible Dedication, {name}!**

You have an amazing **{days}-day learning streak!**

🏆 **Achievement Unlocked: Consistency Master**

Your dedication is truly inspiring! Research shows that consistent learners like you:
• Achieve 3x better results
• Retain information 80% longer
• Develop stronger neural pathways
• Build lasting learning habits

💎 **Your Consistency Impact:**
• You're in the top 5% of learners
• Your brain is optimized for learning
• You've built an unshakeable habit

Keep this incredible momentum going! You're unstoppable! 🌟"""
        elif days >= STREAK_MOMENTUM_DAYS:
            text = f"""⚡ **Great Momentum, {name}!**

You've maintained a solid **{days}-day streak!**

🎯 **Consistency Analysis:**
You're building excellent learning habits! Two weeks of consistent practice shows real commitment.

📊 **Benefits You're Experiencing:**
• Improved information retention
• Stronger concept connections
• Better problem-solving skills
• Growing confidence

💡 **Next Milestone:**
Try to reach 30 days for maximum habit formation. You're halfway there!

Keep up the excellent work! 💪"""
        elif days >= STREAK_BUILDING_DAYS:
            text = f"""🎯 **Building Momentum, {name}!**

You have a **{days}-day streak!**

🌱 **Progress Recognition:**
You're developing a good learning routine! One week of consistency is a strong start.

💡 **Optimization Tips:**
• Study at the same time each day
• Set a minimum daily goal (15 minutes)
• Track your progress visually
• Reward yourself for milestones

🎯 **Challenge:**
Can you reach 14 days? You're well on your way! 📚"""
        elif days >= 1:
            text = f"""🌱 **Starting Strong, {name}!**

Current streak: **{days} days**

💡 **Building Consistency:**
You're taking the first steps toward a powerful learning habit!

🎯 **Consistency Strategy:**
• Start small: 10-15 minutes daily
• Choose a specific time each day
• Make it non-negotiable
• Track your progress
• Celebrate each day

📊 **Why It Matters:**
Consistency beats intensity. Daily practice, even brief, leads to:
• Better retention (up to 80% improvement)
• Faster skill development
• More rewards (stars & credits)
• Greater confidence

Let's build your streak together! 🚀"""
        else:
            text = f"""{name}, let's build your learning consistency! 📅

🎯 **The Power of Consistency:**

**Scientific Benefits:**
• 80% better retention with daily practice
• 3x faster skill development
• Stronger neural pathways
• Improved long-term memory

**Practical Benefits:**
• More stars and credits
• Better quiz performance
• Greater confidence
• Lasting knowledge

💡 **Your Consistency Plan:**

**Week 1: Foundation**
• 10-15 minutes daily
• Same time each day
• One video or quiz

**Week 2: Building**
• 20-30 minutes daily
• Mix videos and quizzes
• Track your progress

**Week 3+: Mastery**
• 30+ minutes daily
• Advanced topics
• Teaching others

Start today! Complete just one quiz or watch one video. I'll help you track your progress! 💪"""

        return Draft(text, Tone.MOTIVATIONAL)

    # ==================== Course-scoped ====================

    def _respond_course_deep_dive(self, request: RuleRequest) -> Draft:
        course = request.context.course
        style = request.context.learner.learning_style

        if style == "visual":
            path = """**Step 1:** Start with video tutorials (your strength!)
**Step 2:** Review course materials for details
**Step 3:** Take notes while watching
**Step 4:** Test with quizzes"""
        elif style == "reading":
            path = """**Step 1:** Begin with course materials (your strength!)
**Step 2:** Watch videos for visual reinforcement
**Step 3:** Take detailed notes
**Step 4:** Practice with quizzes"""
        else:
            path = """**Step 1:** Combine videos and materials
**Step 2:** Alternate between visual and text learning
**Step 3:** Take comprehensive notes
**Step 4:** Regular quiz practice"""

        text = f"""📖 **Deep Dive: {course.title}**

{course.description}

🎯 **Course Overview:**
• **Level:** {course.difficulty_label.capitalize()}
• **Credits:** {course.credits} 💎
• **Recommended For:** {_joined(course.recommended_for, 'All learners')}

💡 **Personalized Learning Path for {style} Learners:**

{path}

🎓 **Available Resources:**
• {len(course.videos)} video tutorials
• {len(course.materials)} study materials
• {course.question_count} practice questions

What specific aspect would you like me to clarify? I can explain any concept in detail! 🤔"""

        resources = []
        if course.videos:
            resources.append(ResourceItem(ResourceType.VIDEO, f"{course.title} Videos", "Visual explanations"))
        if course.materials:
            resources.append(ResourceItem(ResourceType.MATERIAL, f"{course.title} Materials", "Detailed content"))
        if course.question_count > 0:
            resources.append(ResourceItem(ResourceType.QUIZ, f"{course.title} Quiz", "Test your knowledge"))
        return Draft(text, Tone.EXPLANATORY, resources)

    def _respond_course_materials(self, request: RuleRequest) -> Draft:
        course = request.context.course

        if not course.materials:
            text = f"""The {course.title} course materials are being prepared!

🎥 **In the Meantime:**
The video tutorials provide excellent coverage of all topics. I can also fetch specific YouTube videos for any concepts you want to learn!

💡 **What I Can Do:**
• Fetch targeted video tutorials
• Explain concepts in detail
• Provide study strategies
• Answer specific questions

What topic would you like to explore? 🎓"""
            return Draft(text, Tone.GUIDING)

        materials_list = "\n".join(f"**{i + 1}. {m.title}**" for i, m in enumerate(course.materials))
        text = f"""📚 **{course.title} Study Materials**

Comprehensive materials available:

{materials_list}

🎯 **Effective Study Strategy:**

**Phase 1: Preview (5 min)**
• Skim through section titles
• Identify key topics
• Set learning objectives

**Phase 2: Active Reading (20 min)**
• Read carefully, one section at a time
• Highlight key concepts
• Take detailed notes
• Create examples

**Phase 3: Reinforcement (10 min)**
• Watch related videos
• Practice with examples
• Summarize in your own words

**Phase 4: Assessment (10 min)**
• Take section quizzes
• Review mistakes
• Clarify doubts with me

Which material would you like to explore first? I can help explain any concept! 📖"""
        resources = [ResourceItem(ResourceType.MATERIAL, m.title, "Course material") for m in course.materials]
        return Draft(text, Tone.EXPLANATORY, resources)

    def _respond_course_quiz(self, request: RuleRequest) -> Draft:
        course = request.context.course

        if course.question_count <= 0:
            text = f"""The {course.title} quiz is being prepared!

📚 **Focus on Learning:**
In the meantime, concentrate on:
• Watching the video tutorials
• Reviewing course materials
• Taking notes
• Asking me questions

I'll let you know when the quiz is ready! 🎓"""
            return Draft(text, Tone.GUIDING)

        text = f"""📝 **{course.title} Quiz Preparation**

The quiz has **{course.question_count} questions** covering all key concepts.

🎯 **Pre-Quiz Checklist:**

**Preparation (Recommended):**
✅ Watch at least 2-3 course videos
✅ Review the course materials
✅ Take notes on important points
✅ Understand core concepts

💡 **Quiz Success Strategy:**

**During the Quiz:**
• Read each question carefully
• Take your time - no rush!
• Think through your answer
• Use "Ask the mentor for help" if stuck
• Review before submitting

**After the Quiz:**
• Review incorrect answers
• Understand why you missed them
• Ask me for clarification
• Retake to improve your score

🎓 **Scoring System:**
• 90%+: 3 stars ⭐⭐⭐
• 70-89%: 2 stars ⭐⭐
• 60-69%: 1 star ⭐

Ready to test your knowledge? Click "Take Quiz" on the course card! 🎯"""
        return Draft(text, Tone.GUIDING, [
            ResourceItem(ResourceType.QUIZ, f"{course.title} Quiz", f"{course.question_count} questions"),
        ])

    # ==================== Study strategy ====================

    def _respond_study_strategy(self, request: RuleRequest) -> Draft:
        learner = request.context.learner
        if learner.interests:
            focus = f"Concentrate on: {' and '.join(learner.interests[:2])}"
        else:
            focus = "Explore courses that interest you"

        text = f"""🎓 **Personalized Learning Strategy for {learner.name}**

Based on your **{learner.learning_style}** learning style and goals, here's your optimal approach:

📚 **Your Customized Study Framework:**

**Daily Learning Routine (60 minutes):**

**1. Preparation Phase (10 min)**
• Review course objectives
• Set specific learning goals
• Prepare note-taking materials

**2. Active Learning (25 min)**
• Watch 2-3 video tutorials
• Pause and take notes
• Practice along with examples

**3. Reinforcement (15 min)**
• Read course materials
• Create concept summaries
• Make connections to prior knowledge

**4. Practice Phase (15 min)**
• Take practice quizzes
• Apply concepts to problems
• Test understanding

**5. Review & Reflect (5 min)**
• Summarize key learnings
• Identify areas for improvement
• Plan next session

💡 **Advanced Learning Techniques:**

**Pomodoro Method:**
• 25 min focused study
• 5 min break
• Repeat 4 times
• 15-30 min long break

**Active Recall:**
• Close materials
• Explain concepts aloud
• Test yourself frequently
• Teach others (or me!)

**Spaced Repetition:**
• Review within 24 hours
• Again after 3 days
• Again after 7 days
• Again after 30 days

🎯 **Your Current Focus:**
{focus}

What specific area would you like to improve? I can provide targeted strategies! 🚀"""
        return Draft(text, Tone.GUIDING)

    # ==================== Struggle ====================

    def _respond_struggle(self, request: RuleRequest) -> Draft:
        ctx = request.context
        text = f"""{ctx.learner.name}, I understand learning can be challenging, but you're doing amazing by seeking help! 💪

🌟 **Important Reminders:**

• Every expert was once a beginner
• Mistakes prove you're trying and learning
• Progress isn't always linear - plateaus are normal
• You've already completed {ctx.performance.total_quizzes} quizzes - that's real dedication!

💡 **Let's Break It Down Together:**

**Step 1: Identify the Challenge**
What specific concept is confusing you? Be as specific as possible.

**Step 2: Targeted Learning**
I'll fetch YouTube videos specifically for that topic and explain it in simpler terms.

**Step 3: Practice & Apply**
We'll work through examples together until it clicks.

**Step 4: Build Confidence**
Start with easier problems and gradually increase difficulty.

🎯 **Your Personalized Action Plan:**

**Immediate Actions:**
1. Tell me exactly what's confusing
2. I'll explain it in multiple ways
3. I'll fetch targeted video tutorials
4. We'll practice together

**Learning Adjustments:**
• Watch videos at 0.75x speed if needed
• Take more detailed notes
• Break topics into smaller chunks
• Ask questions without hesitation

**Mindset Shifts:**
• "I can't do this YET"
• Every struggle is growth
• Confusion means you're learning
• I'm here to support you!

You've got this! What specific concept is giving you trouble? Let's tackle it together! 🚀"""
        # Tone comes from the classifier; a struggle keyword always yields motivational
        return Draft(text, request.tone)

    # ==================== Goals ====================

    def _respond_goals(self, request: RuleRequest) -> Draft:
        ctx = request.context
        learner = ctx.learner
        perf = ctx.performance
        focus_areas = " and ".join(learner.interests[:2]) or "your areas of interest"

        if learner.goals:
            level = f"{_num(perf.average_score)}% average" if perf.average_score > 0 else "Just starting"
            text = f"""🎯 **Your Learning Goals, {learner.name}**

**Your Stated Goals:**
{_numbered(learner.goals)}

📊 **Progress Analysis:**

**Current Status:**
• Courses Explored: Check dashboard
• Skills Developing: {_joined(learner.interests, 'Multiple areas')}
• Performance Level: {level}
• Total Credits: {perf.total_credits}
• Learning Streak: {ctx.consistency.active_day_count} days

🚀 **Goal Achievement Roadmap:**

**Phase 1: Foundation (Weeks 1-2)**
• Identify courses aligned with goals
• Complete 3 quizzes per week
• Watch all course videos
• Build daily learning habit

**Phase 2: Development (Weeks 3-4)**
• Deep dive into core topics
• Achieve 80%+ quiz scores
• Maintain daily consistency
• Earn target credits

**Phase 3: Mastery (Weeks 5+)**
• Advanced topics and challenges
• Apply knowledge to projects
• Teach concepts to others
• Set new ambitious goals

💡 **Recommended Focus:**
Based on your goals, start with courses in: {focus_areas}

I can also fetch specific YouTube tutorials for any topic you want to master!

Which goal would you like to prioritize? Let's create a detailed action plan! 🌟"""
            return Draft(text, Tone.GUIDING)

        text = f"""🎯 **Setting Clear Goals, {learner.name}**

Setting clear, achievable goals is the first step to success!

💡 **Goal-Setting Framework:**

**1. Define Your "Why"**
• What motivates you to learn?
• What problem do you want to solve?
• What career path interests you?

**2. Set SMART Goals**
• **S**pecific: Clear and well-defined
• **M**easurable: Track your progress
• **A**chievable: Realistic and attainable
• **R**elevant: Aligned with your interests
• **T**ime-bound: Set deadlines

**3. Break Down Big Goals**
• Long-term (6-12 months)
• Medium-term (1-3 months)
• Short-term (1-4 weeks)
• Daily actions

📚 **Example Goal Structure:**

**Long-term:** "Become a full-stack developer"
**Medium-term:** "Complete 5 web development courses"
**Short-term:** "Finish JavaScript course this month"
**Daily:** "Watch 2 videos and take 1 quiz"

🎯 **What I Can Help With:**

Once we clarify your goals, I can:
✅ Recommend specific courses
✅ Fetch targeted YouTube tutorials
✅ Create a personalized study schedule
✅ Set progress milestones
✅ Track your achievements
✅ Adjust strategy as needed

What would you like to achieve through learning? Let's define your goals together! 🚀"""
        return Draft(text, Tone.GUIDING)

    # ==================== Recommendations ====================

    def _respond_recommendation(self, request: RuleRequest) -> Draft:
        ctx = request.context
        perf = ctx.performance
        learner = ctx.learner
        streak = ctx.consistency.active_day_count

        if perf.average_score < RECOMMEND_REVIEW_BELOW and perf.total_quizzes > 0:
            recommendations = [
                "📚 Review course materials for challenging topics",
                "🎥 I can fetch targeted YouTube videos for difficult concepts",
                "📝 Take practice quizzes to reinforce learning",
                "💡 Focus on understanding, not just memorizing",
            ]
        elif perf.average_score >= RECOMMEND_ADVANCE_FROM:
            recommendations = [
                "🚀 Challenge yourself with advanced courses",
                "🎯 Explore new topics in your interest areas",
                "⭐ Aim for perfect scores to maximize credits",
                "👥 Consider teaching concepts to reinforce mastery",
            ]
        else:
            recommendations = [
                "📖 Balance video learning with reading materials",
                "✍️ Take detailed, organized notes",
                "🔄 Review previous quiz questions",
                "🎥 Watch videos at your own pace",
            ]

        streak_text = f"{streak}-day streak" if streak > 0 else "learning consistency"
        text = f"""🎓 **Personalized Recommendations for {learner.name}**

Based on your learning profile and performance, here's what I suggest:

{_numbered(recommendations)}

💡 **Strategic Next Steps:**

**Immediate Actions:**
• Explore courses in: {_joined(learner.interests[:3], 'your areas of interest')}
• Maintain your {streak_text}
• Set a goal to earn {perf.total_credits + 50} total credits

**This Week's Focus:**
• Pick one course that excites you
• Watch 2-3 videos daily
• Take at least one quiz
• Ask me questions about concepts

**This Month's Goal:**
• Complete 2-3 full courses
• Achieve 80%+ average score
• Build a 30-day learning streak
• Earn 100+ credits

🎯 **Today's Action:**
Pick one course, watch 2 videos, and take a quiz. I can also fetch fresh YouTube tutorials for any topic you want to learn!

Which area would you like to explore? Let's create your learning plan! 🚀"""
        return Draft(text, Tone.GUIDING, [
            ResourceItem(ResourceType.VIDEO, "Recommended Video Tutorials", "I can fetch videos for any topic"),
            ResourceItem(ResourceType.QUIZ, "Practice Quizzes", "Test and improve"),
        ])

    # ==================== Gratitude ====================

    def _respond_gratitude(self, request: RuleRequest) -> Draft:
        ctx = request.context
        stars = ctx.performance.stars
        if stars > 0:
            stars_line = f"🌟 You've already earned **{stars} stars** - keep up the excellent work!"
        else:
            stars_line = "🌱 Keep learning and growing!"

        text = f"""You're very welcome, {ctx.learner.name}! 😊

I'm always here to support your learning journey. Your dedication to improving is truly inspiring!

{stars_line}

💡 **Remember:**
• I can fetch YouTube videos for any topic
• Ask me anything, anytime
• I'm here to help you succeed
• Your questions make you stronger

Let's continue achieving your goals together! 🚀"""
        return Draft(text, Tone.MOTIVATIONAL)

    # ==================== Default ====================

    def _respond_default(self, request: RuleRequest) -> Draft:
        ctx = request.context
        perf = ctx.performance
        if perf.total_quizzes > 0:
            closing = (
                f"🌟 **By the way:** You're doing great with {perf.total_quizzes} quizzes completed "
                f"and {_num(perf.average_score)}% average!"
            )
        else:
            closing = "🚀 **Ready to start?** Pick a course and let's begin your learning journey!"

        text = f"""That's an interesting question, {ctx.learner.name}! 🤔

I want to give you the most helpful answer. Here's what I can do for you:

🎥 **Fetch YouTube Videos**
Tell me any topic, and I'll find the best tutorials for you in real-time using YouTube API.

📚 **Course Content**
Check course cards for detailed materials, videos, and quizzes.

📝 **Practice & Assessment**
Test your knowledge with quizzes and get immediate feedback.

💡 **Ask Me Specifically About:**

**Learning Support:**
• Explaining concepts from any course
• Finding YouTube videos for specific topics
• Study strategies and techniques
• Time management tips

**Progress Analysis:**
• Your performance metrics
• Learning consistency
• Goal achievement
• Personalized recommendations

**Course Guidance:**
• Which courses to take
• How to approach difficult topics
• Best learning resources
• Quiz preparation strategies

{closing}

What would you like to explore? I'm here to help! 📖"""
        return Draft(text, Tone.GUIDING, [
            ResourceItem(ResourceType.VIDEO, "YouTube Video Search", "I can fetch videos for any topic"),
            ResourceItem(ResourceType.MATERIAL, "Course Materials", "Detailed study content"),
            ResourceItem(ResourceType.QUIZ, "Practice Quizzes", "Test your knowledge"),
        ])
